"""Regression estimators."""

from .gradient_boost import GradientBoost, TrainingState

__all__ = ["GradientBoost", "TrainingState"]
