"""
Stage-wise gradient boosting toolkit.

Dataset containers, weak learners, a gradient boosting ensemble regressor
with hold-out early stopping, validation metrics, cross validation
strategies and filesystem persistence.
"""

from .datasets import Labeled, Unlabeled
from .enums import DataType, EstimatorType
from .regressors import GradientBoost

__version__ = "0.1.0"
__all__ = ["GradientBoost", "Labeled", "Unlabeled", "DataType", "EstimatorType"]
