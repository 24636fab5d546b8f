"""Computer opponent: heuristic evaluation, alpha-beta search and difficulty tiers."""

from .heuristic import DEFAULT_WEIGHTS, POSITION_WEIGHTS, WIN_SCORE, HeuristicWeights, evaluate
from .difficulty import (
    DEFAULT_PROFILES,
    Difficulty,
    DifficultyProfile,
    get_profile,
    load_profiles,
    load_weights,
    profiles_from_dict,
    validate_profiles,
    weights_from_dict,
)
from .search import AlphaBetaSearch, SearchResult, choose_move
from .policy import Policy, RandomPolicy, SearchPolicy

__all__ = [
    "DEFAULT_WEIGHTS",
    "POSITION_WEIGHTS",
    "WIN_SCORE",
    "HeuristicWeights",
    "evaluate",
    "DEFAULT_PROFILES",
    "Difficulty",
    "DifficultyProfile",
    "get_profile",
    "load_profiles",
    "load_weights",
    "profiles_from_dict",
    "validate_profiles",
    "weights_from_dict",
    "AlphaBetaSearch",
    "SearchResult",
    "choose_move",
    "Policy",
    "RandomPolicy",
    "SearchPolicy",
]
