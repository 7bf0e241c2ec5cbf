"""
Unit tests for validation metrics.
"""

import math
import sys
from pathlib import Path

import numpy as np
import pytest
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

# Add src directory to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from boostml.exceptions import InvalidArgumentError
from boostml.metrics import RMSE, MeanAbsoluteError, MeanSquaredError, RSquared


Y_TRUE = np.array([3.0, -0.5, 2.0, 7.0])
Y_PRED = np.array([2.5, 0.0, 2.0, 8.0])


def test_rmse_known_value():
    assert RMSE().score(Y_PRED, Y_TRUE) == pytest.approx(
        np.sqrt(mean_squared_error(Y_TRUE, Y_PRED)), rel=1e-12
    )


def test_mse_and_mae_known_values():
    assert MeanSquaredError().score(Y_PRED, Y_TRUE) == pytest.approx(
        mean_squared_error(Y_TRUE, Y_PRED), rel=1e-12
    )
    assert MeanAbsoluteError().score(Y_PRED, Y_TRUE) == pytest.approx(
        mean_absolute_error(Y_TRUE, Y_PRED), rel=1e-12
    )


def test_r_squared_known_value():
    assert RSquared().score(Y_PRED, Y_TRUE) == pytest.approx(r2_score(Y_TRUE, Y_PRED), rel=1e-12)


def test_perfect_predictions():
    assert RMSE().score(Y_TRUE, Y_TRUE) == 0.0
    assert RSquared().score(Y_TRUE, Y_TRUE) == pytest.approx(1.0)


def test_length_mismatch():
    with pytest.raises(InvalidArgumentError, match="4 predictions and 3 labels"):
        RMSE().score(Y_PRED, Y_TRUE[:3])


def test_empty_predictions():
    with pytest.raises(InvalidArgumentError):
        RMSE().score([], [])


def test_non_finite_predictions_score_worst():
    predictions = np.array([1.0, np.nan, 2.0, 3.0])
    assert RMSE().score(predictions, Y_TRUE) == math.inf
    assert RSquared().score(predictions, Y_TRUE) == -math.inf


class TestDirection:
    """Range, best/worst and improvement must follow the metric's direction."""

    def test_lower_is_better(self):
        metric = RMSE()
        assert metric.range() == (0.0, math.inf)
        assert metric.worst() == math.inf
        assert metric.best() == 0.0
        assert metric.is_improvement(1.0, 2.0)
        assert not metric.is_improvement(2.0, 2.0)
        assert metric.is_perfect(0.0)
        assert not metric.is_perfect(1e-9)

    def test_higher_is_better(self):
        metric = RSquared()
        assert metric.worst() == -math.inf
        assert metric.best() == 1.0
        assert metric.is_improvement(0.9, 0.5)
        assert not metric.is_improvement(0.5, 0.5)
        assert metric.is_perfect(1.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
