#!/usr/bin/env python3
"""Pit a difficulty tier against a baseline policy (or another tier) and print JSON results."""

import argparse
import json
import logging

import numpy as np

from morris.ai import DEFAULT_PROFILES, Difficulty, RandomPolicy, SearchPolicy, get_profile, load_profiles, load_weights
from morris.evaluation import RuleBasedPolicy, evaluate_policies


def build_opponent(name: str, profiles, weights, seed: int):
    if name == "random":
        return RandomPolicy(np.random.default_rng(seed))
    if name == "rule":
        return RuleBasedPolicy(np.random.default_rng(seed))
    return SearchPolicy(get_profile(name, profiles), weights=weights, rng=np.random.default_rng(seed))


def main() -> None:
    tiers = [d.value for d in Difficulty]
    parser = argparse.ArgumentParser()
    parser.add_argument("--difficulty", choices=tiers, default="medium")
    parser.add_argument("--baseline", choices=["random", "rule"] + tiers, default="rule")
    parser.add_argument("--episodes", type=int, default=10)
    parser.add_argument("--max-ply", type=int, default=200)
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--swap-sides", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    profiles = load_profiles(args.config) if args.config else DEFAULT_PROFILES
    weights = load_weights(args.config) if args.config else None

    profile = get_profile(args.difficulty, profiles)
    policy = SearchPolicy(profile, weights=weights, rng=np.random.default_rng(args.seed))
    baseline = build_opponent(args.baseline, profiles, weights, args.seed + 1)

    result = evaluate_policies(
        policy,
        baseline,
        episodes=args.episodes,
        max_ply=args.max_ply,
        swap_sides=args.swap_sides,
    )

    output = {
        "difficulty": profile.name,
        "baseline": args.baseline,
        "games": result.games_played,
        "ai_wins": result.player_one_wins,
        "baseline_wins": result.player_two_wins,
        "draws": result.draws,
        "average_length": result.average_length,
        "ai_winrate": result.winrate_player_one(),
        "baseline_winrate": result.winrate_player_two(),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
