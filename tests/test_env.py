import numpy as np
import pytest

from morris import MorrisEnv
from morris.core import ACTION_VECTOR_SIZE, Capture, Place, encode_action, legal_moves


def test_reset_returns_valid_observation():
    env = MorrisEnv()
    obs, info = env.reset()

    assert obs["board"].shape == (3, 24)
    assert obs["aux"].shape == (10,)
    assert "legal_action_mask" in info
    assert info["legal_action_mask"].shape == (ACTION_VECTOR_SIZE,)
    assert env.observation_space.contains(obs)


def test_legal_mask_matches_enumeration():
    env = MorrisEnv()
    env.reset()
    mask = env.legal_action_mask()
    legal = legal_moves(env.state)
    assert np.count_nonzero(mask) == len(legal) == 24
    for move in legal:
        assert mask[encode_action(move)] == 1


def test_step_advances_state_and_returns_reward():
    env = MorrisEnv()
    obs, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])

    next_obs, reward, terminated, truncated, next_info = env.step(action)

    assert reward == 0.0
    assert not terminated
    assert not truncated
    assert np.any(next_obs["board"] != obs["board"])
    assert next_info["current_player"] == 2


def test_mill_restricts_actions_to_captures():
    env = MorrisEnv()
    env.reset()
    info = {}
    for position in (0, 23, 1, 12, 2):
        _, _, _, _, info = env.step(encode_action(Place(position)))

    assert info["awaiting_capture"]
    assert info["current_player"] == 1
    allowed = set(np.flatnonzero(info["legal_action_mask"]).tolist())
    assert allowed == {encode_action(Capture(12)), encode_action(Capture(23))}

    _, _, _, _, info = env.step(encode_action(Capture(12)))
    assert not info["awaiting_capture"]
    assert info["current_player"] == 2


def test_illegal_action_is_rejected():
    env = MorrisEnv()
    env.reset()
    env.step(encode_action(Place(0)))
    with pytest.raises(ValueError):
        env.step(encode_action(Place(0)))
    with pytest.raises(ValueError):
        env.step(ACTION_VECTOR_SIZE)


def test_truncation_after_max_ply():
    env = MorrisEnv(max_ply=2)
    env.reset()
    env.step(encode_action(Place(0)))
    _, _, terminated, truncated, _ = env.step(encode_action(Place(5)))
    assert truncated and not terminated


def test_render_ansi():
    env = MorrisEnv(render_mode="ansi")
    env.reset()
    env.step(encode_action(Place(4)))
    text = env.render()
    assert "X" in text
    assert text.count("\n") == 12
