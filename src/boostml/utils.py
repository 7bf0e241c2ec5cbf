"""
Utility functions for gradient boosting: squared-error gradient, loss and
the shrunk additive update, plus random number generator handling.

References:
- Friedman, J. H. (2001). Greedy function approximation: A gradient boosting machine.
- Friedman, J. H. (1999). Stochastic gradient boosting.
"""

import math
from typing import Optional, Union

import numpy as np


RandomState = Optional[Union[int, np.random.Generator]]


# ===========================
# Loss Functions and Gradients
# ===========================

def squared_error_negative_gradient(y_true: np.ndarray, y_pred: np.ndarray) -> np.ndarray:
    """
    Negative gradient (pseudo-residuals) for squared-error loss.

    For L(y, f) = 0.5 * (y - f)^2, the negative gradient is:
    -∂L/∂f = y - f (the residuals).
    """
    return np.asarray(y_true, dtype=np.float64) - np.asarray(y_pred, dtype=np.float64)


def l2_loss(gradient: np.ndarray) -> float:
    """Mean of the squared gradient: (1/n) Σ g_i^2."""
    gradient = np.asarray(gradient, dtype=np.float64)
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.mean(gradient ** 2))


def update_output(
    predictions: np.ndarray,
    previous: np.ndarray,
    rate: float
) -> np.ndarray:
    """Shrunk stage-wise update: f_m(x) = ν * h_m(x) + f_{m-1}(x)."""
    return rate * np.asarray(predictions, dtype=np.float64) + previous


def half_up_round(x: float) -> int:
    """Round half away from zero for non-negative values (2.5 -> 3)."""
    return int(math.floor(x + 0.5))


# ===========================
# Randomness
# ===========================

def check_random_state(random_state: RandomState = None) -> np.random.Generator:
    """Turn a seed, a Generator or None into a numpy Generator."""
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)
