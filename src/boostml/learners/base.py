"""
Learner interfaces.

A learner is anything that can be trained on a labeled dataset, predict on
any dataset with the same dimensionality, and be cloned into a fresh,
untrained instance with identical hyperparameters.
"""

import copy
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np

from ..datasets import Dataset
from ..enums import DataType, EstimatorType


def stringify(params: Dict[str, Any]) -> str:
    """Render hyperparameters as ``key: value`` pairs."""
    return ", ".join(f"{key}: {value}" for key, value in params.items())


class Learner(ABC):
    """Base class for trainable estimators."""

    NAME = "Learner"

    @abstractmethod
    def estimator_type(self) -> EstimatorType:
        """Kind of output this estimator produces."""

    @abstractmethod
    def compatibility(self) -> List[DataType]:
        """Feature data types the learner accepts."""

    @abstractmethod
    def params(self) -> Dict[str, Any]:
        """Hyperparameters keyed by constructor argument name."""

    @abstractmethod
    def trained(self) -> bool:
        """Has the learner been trained?"""

    @abstractmethod
    def train(self, dataset: Dataset) -> None:
        """Train the learner on a labeled dataset."""

    @abstractmethod
    def predict(self, dataset: Dataset) -> np.ndarray:
        """One prediction per row, in row order."""

    def clone(self) -> "Learner":
        """Fresh untrained instance with the same hyperparameters."""
        params = {}

        for key, value in self.params().items():
            if isinstance(value, Learner):
                params[key] = value.clone()
            else:
                params[key] = copy.deepcopy(value)

        return self.__class__(**params)

    def __str__(self) -> str:
        return f"{self.NAME} ({stringify(self.params())})"


class RanksFeatures(ABC):
    """Learner that can score the importance of each feature column."""

    @abstractmethod
    def feature_importances(self) -> np.ndarray:
        """Non-negative importance per feature column."""


class Persistable:
    """Estimator that can be saved by a persister."""

    def revision(self) -> str:
        """
        Short fingerprint of the estimator class and its hyperparameters.

        Two estimators with the same revision are configured identically,
        so a saved model can be matched against the code that loads it.
        """
        fingerprint = f"{type(self).__module__}.{type(self).__qualname__}({stringify(self.params())})"

        return hashlib.sha256(fingerprint.encode("utf-8")).hexdigest()[:8]


class Verbose:
    """
    Estimator that reports its progress to an optional logger.

    The logger only ever receives ``info`` messages; having none attached
    changes nothing about training or its results.
    """

    _logger: Optional[logging.Logger] = None

    def set_logger(self, logger: Optional[logging.Logger]) -> None:
        self._logger = logger

    @property
    def logger(self) -> Optional[logging.Logger]:
        return self._logger

    def _log(self, message: str) -> None:
        if self._logger is not None:
            self._logger.info(message)
