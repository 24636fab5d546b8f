from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from .heuristic import HeuristicWeights


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


@dataclass(frozen=True)
class DifficultyProfile:
    """Search depth plus the amount of deliberate imprecision at a tier.

    ``randomness`` is the probability of perturbing a root candidate's score
    by up to ``noise`` points and, separately, of picking uniformly among the
    ``top_k`` best candidates instead of the best one. ``thinking_ms`` is a
    pacing hint for front-ends and is ignored by the search itself.
    """

    name: str
    depth: int
    randomness: float = 0.0
    noise: int = 0
    top_k: int = 1
    thinking_ms: int = 0

    def __post_init__(self) -> None:
        if self.depth < 1:
            raise ValueError(f"{self.name}: depth must be at least 1.")
        if not 0.0 <= self.randomness <= 1.0:
            raise ValueError(f"{self.name}: randomness must lie in [0, 1].")
        if self.noise < 0 or self.top_k < 1 or self.thinking_ms < 0:
            raise ValueError(f"{self.name}: noise, top_k and thinking_ms must be non-negative.")

    @property
    def deterministic(self) -> bool:
        return self.randomness == 0.0 or (self.noise == 0 and self.top_k == 1)


DEFAULT_PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile("easy", depth=1, randomness=0.35, noise=50, top_k=3, thinking_ms=100),
    Difficulty.MEDIUM: DifficultyProfile("medium", depth=2, randomness=0.15, noise=25, top_k=2, thinking_ms=200),
    Difficulty.HARD: DifficultyProfile("hard", depth=3, thinking_ms=500),
    Difficulty.EXPERT: DifficultyProfile("expert", depth=4, thinking_ms=1000),
}

ProfileKey = Union[str, Difficulty]


def get_profile(
    key: ProfileKey,
    profiles: Optional[Mapping[Difficulty, DifficultyProfile]] = None,
) -> DifficultyProfile:
    difficulty = key if isinstance(key, Difficulty) else Difficulty(str(key).lower())
    return (profiles or DEFAULT_PROFILES)[difficulty]


def validate_profiles(profiles: Mapping[Difficulty, DifficultyProfile]) -> None:
    """Raise ``ValueError`` unless depth grows and randomness shrinks with the tier."""
    ordered = [profiles[level] for level in Difficulty]
    for weaker, stronger in zip(ordered, ordered[1:]):
        if stronger.depth <= weaker.depth:
            raise ValueError(f"{stronger.name} must search deeper than {weaker.name}.")
        if stronger.randomness > weaker.randomness:
            raise ValueError(f"{stronger.name} must not be more random than {weaker.name}.")


def _read_yaml(path: Union[str, Path]) -> Dict:
    return yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}


def profiles_from_dict(cfg: Mapping) -> Dict[Difficulty, DifficultyProfile]:
    allowed = {f.name for f in fields(DifficultyProfile)} - {"name"}
    profiles = dict(DEFAULT_PROFILES)
    for key, overrides in (cfg or {}).items():
        difficulty = Difficulty(str(key).lower())
        unknown = set(overrides or {}) - allowed
        if unknown:
            raise KeyError(f"Unknown profile fields for {difficulty.value}: {sorted(unknown)}")
        profiles[difficulty] = replace(profiles[difficulty], **(overrides or {}))
    validate_profiles(profiles)
    return profiles


def weights_from_dict(cfg: Mapping) -> HeuristicWeights:
    allowed = {f.name for f in fields(HeuristicWeights)}
    unknown = set(cfg or {}) - allowed
    if unknown:
        raise KeyError(f"Unknown heuristic weights: {sorted(unknown)}")
    return HeuristicWeights(**(cfg or {}))


def load_profiles(path: Union[str, Path]) -> Dict[Difficulty, DifficultyProfile]:
    return profiles_from_dict(_read_yaml(path).get("difficulty", {}))


def load_weights(path: Union[str, Path]) -> HeuristicWeights:
    return weights_from_dict(_read_yaml(path).get("heuristic", {}))
