"""Weak and base learners consumed by the boosting ensemble."""

from .base import Learner, Persistable, RanksFeatures, Verbose
from .dummy import DummyRegressor
from .trees import ExtraTreeRegressor, RegressionTree

__all__ = [
    "Learner",
    "Persistable",
    "RanksFeatures",
    "Verbose",
    "DummyRegressor",
    "RegressionTree",
    "ExtraTreeRegressor",
]
