"""Evaluation helpers for Pressure AI levels."""

from .match import EvaluationResult, evaluate_levels, play_match, randomized_search_factory

__all__ = ["EvaluationResult", "evaluate_levels", "play_match", "randomized_search_factory"]
