from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from morris.core import (
    ACTION_VECTOR_SIZE,
    GameState,
    Player,
    apply_move,
    decode_action,
    encode_action,
    initialize_game_state,
    legal_moves,
)
from morris.core.topology import NUM_POSITIONS
from morris.features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor


class MorrisEnv(gym.Env):
    """Single-step environment: placements, relocations and captures are separate actions.

    A mill leaves the same player to move with only capture actions legal.
    Rewards are from player one's point of view.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        max_ply: int = 400,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(
                    low=0.0, high=1.0, shape=(BOARD_CHANNELS, NUM_POSITIONS), dtype=np.float32
                ),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(ACTION_VECTOR_SIZE)

        self._state = initialize_game_state()
        self._last_info: Dict[str, object] = {}

    @property
    def state(self) -> GameState:
        return self._state.copy()

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_ply" in options:
            self._max_ply = int(options["max_ply"])
        self._state = initialize_game_state()
        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info
        return observation, info

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")
        if self._state.game_over:
            raise ValueError("Episode has finished; call reset().")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        move = decode_action(int(action_index))
        self._state = apply_move(self._state, move, in_place=False)

        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info

        terminated = self._state.game_over
        truncated = not terminated and self._state.ply_count >= self._max_ply
        reward = self._compute_reward(self._state)

        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        for move in legal_moves(self._state):
            mask[encode_action(move)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self._state.render()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_observation(self) -> Dict[str, np.ndarray]:
        return {"board": build_board_tensor(self._state), "aux": build_aux_vector(self._state)}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "current_player": int(self._state.current_player),
            "awaiting_capture": self._state.pending_capture is not None,
        }

    def _compute_reward(self, state: GameState) -> float:
        if state.winner == Player.ONE:
            return 1.0
        if state.winner == Player.TWO:
            return -1.0
        return 0.0
