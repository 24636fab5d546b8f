"""Nine Men's Morris rules engine and computer opponent."""

from . import ai, core, env, evaluation, features
from .core import GameState, MillGame, Phase, Player, RuleError, initialize_game_state
from .env import MorrisEnv
from .ai import (
    AlphaBetaSearch,
    Difficulty,
    DifficultyProfile,
    HeuristicWeights,
    RandomPolicy,
    SearchPolicy,
    SearchResult,
    choose_move,
    evaluate,
    get_profile,
)
from .evaluation import EvaluationResult, RuleBasedPolicy, evaluate_policies

__all__ = [
    "ai",
    "core",
    "env",
    "evaluation",
    "features",
    "GameState",
    "MillGame",
    "Phase",
    "Player",
    "RuleError",
    "initialize_game_state",
    "MorrisEnv",
    "AlphaBetaSearch",
    "Difficulty",
    "DifficultyProfile",
    "HeuristicWeights",
    "RandomPolicy",
    "SearchPolicy",
    "SearchResult",
    "choose_move",
    "evaluate",
    "get_profile",
    "EvaluationResult",
    "RuleBasedPolicy",
    "evaluate_policies",
]
