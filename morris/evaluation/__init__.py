"""Evaluation helpers for the Morris AI."""

from .match import EvaluationResult, RuleBasedPolicy, evaluate_policies, play_game

__all__ = ["EvaluationResult", "RuleBasedPolicy", "evaluate_policies", "play_game"]
