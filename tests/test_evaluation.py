import numpy as np

from morris.ai import DifficultyProfile, RandomPolicy, SearchPolicy
from morris.core import Capture, CompoundMove, Place, Player, apply_compound_move, initialize_game_state
from morris.evaluation import RuleBasedPolicy, evaluate_policies, play_game

from tests.test_rules import custom_state


def test_evaluate_random_vs_random_small():
    policy_a = RandomPolicy(np.random.default_rng(0))
    policy_b = RandomPolicy(np.random.default_rng(1))
    result = evaluate_policies(policy_a, policy_b, episodes=2, max_ply=120)
    assert result.games_played == 2
    assert result.player_one_wins + result.player_two_wins + result.draws == 2
    assert result.average_length > 0
    assert 0.0 <= result.winrate_player_one() <= 1.0


def test_swap_sides_credits_the_policy():
    search = SearchPolicy(DifficultyProfile("probe", depth=1), rng=np.random.default_rng(0))
    rule = RuleBasedPolicy(np.random.default_rng(1))
    result = evaluate_policies(search, rule, episodes=2, max_ply=60, swap_sides=True)
    assert result.games_played == 2
    assert result.player_one_wins + result.player_two_wins + result.draws == 2


def test_play_game_stops_at_ply_limit():
    final, history = play_game(
        RandomPolicy(np.random.default_rng(2)),
        RandomPolicy(np.random.default_rng(3)),
        max_ply=10,
    )
    assert len(history) == final.ply_count
    assert final.ply_count <= 10


def test_rule_based_policy_closes_available_mill():
    policy = RuleBasedPolicy(np.random.default_rng(0), placement_mill_chance=1.0)
    state = custom_state([0, 1], [9, 13], remaining=(7, 7))
    move = policy.act(state)

    assert move.move == Place(2)
    assert isinstance(move.capture, Capture)
    assert move.capture.position in (9, 13)


def test_rule_based_policy_plays_legal_moves():
    policy = RuleBasedPolicy(np.random.default_rng(4))
    state = initialize_game_state()
    for _ in range(30):
        if state.game_over:
            break
        move = policy.act(state)
        assert isinstance(move, CompoundMove)
        state = apply_compound_move(state, move)
    assert state.on_board(Player.ONE) > 0
