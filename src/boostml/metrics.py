"""
Validation metrics for regression.

Every metric states its achievable range and its direction explicitly, so
callers that track a "best" score never have to assume that higher is
better.
"""

import math
from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from .enums import EstimatorType
from .exceptions import InvalidArgumentError


class Metric(ABC):
    """Scores a sequence of predictions against the ground truth."""

    NAME = "Metric"

    greater_is_better: bool = True

    @abstractmethod
    def range(self) -> Tuple[float, float]:
        """(min, max) achievable score."""

    @abstractmethod
    def _score(self, predictions: np.ndarray, labels: np.ndarray) -> float:
        pass

    def compatibility(self) -> List[EstimatorType]:
        return [EstimatorType.REGRESSOR]

    def score(self, predictions, labels) -> float:
        predictions = np.asarray(predictions, dtype=np.float64)
        labels = np.asarray(labels, dtype=np.float64)

        if len(predictions) != len(labels):
            raise InvalidArgumentError(
                f"Number of predictions and labels must be equal, "
                f"{len(predictions)} predictions and {len(labels)} labels given."
            )

        if len(predictions) == 0:
            raise InvalidArgumentError("Cannot score an empty set of predictions.")

        if not np.all(np.isfinite(predictions)):
            return self.worst()

        return float(self._score(predictions, labels))

    def worst(self) -> float:
        low, high = self.range()
        return low if self.greater_is_better else high

    def best(self) -> float:
        low, high = self.range()
        return high if self.greater_is_better else low

    def is_improvement(self, score: float, best: float) -> bool:
        """Is ``score`` strictly better than ``best``?"""
        if self.greater_is_better:
            return score > best
        return score < best

    def is_perfect(self, score: float) -> bool:
        if self.greater_is_better:
            return score >= self.best()
        return score <= self.best()

    def __str__(self) -> str:
        return self.NAME


class RMSE(Metric):
    """Root mean squared error, in the units of the target."""

    NAME = "RMSE"

    greater_is_better = False

    def range(self) -> Tuple[float, float]:
        return 0.0, math.inf

    def _score(self, predictions: np.ndarray, labels: np.ndarray) -> float:
        return np.sqrt(mean_squared_error(labels, predictions))


class MeanSquaredError(Metric):
    NAME = "Mean Squared Error"

    greater_is_better = False

    def range(self) -> Tuple[float, float]:
        return 0.0, math.inf

    def _score(self, predictions: np.ndarray, labels: np.ndarray) -> float:
        return mean_squared_error(labels, predictions)


class MeanAbsoluteError(Metric):
    NAME = "Mean Absolute Error"

    greater_is_better = False

    def range(self) -> Tuple[float, float]:
        return 0.0, math.inf

    def _score(self, predictions: np.ndarray, labels: np.ndarray) -> float:
        return mean_absolute_error(labels, predictions)


class RSquared(Metric):
    """
    Coefficient of determination.

    A single-sample or constant-label validation set has no variance to
    explain; sklearn reports nan (or 0.0) there, which is passed through.
    """

    NAME = "R Squared"

    greater_is_better = True

    def range(self) -> Tuple[float, float]:
        return -math.inf, 1.0

    def _score(self, predictions: np.ndarray, labels: np.ndarray) -> float:
        return r2_score(labels, predictions)
