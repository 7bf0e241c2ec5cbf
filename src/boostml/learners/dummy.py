"""
Dummy regressor: predicts a single constant learned from the labels.

Used as the default base learner of the boosting ensemble, where it plays
the role of f_0(x) = argmin_γ Σ L(y_i, γ), i.e. mean(y) for squared error.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .. import specifications
from ..datasets import Dataset
from ..enums import DataType, EstimatorType
from ..exceptions import InvalidArgumentError, NotTrainedError
from .base import Learner, Persistable


class DummyRegressor(Learner, Persistable):
    """
    Constant regressor.

    Parameters
    ----------
    strategy : {"mean", "median", "constant"}, default="mean"
        How the constant is derived from the training labels.
    constant : float, default=0.0
        Value predicted when strategy="constant".
    """

    NAME = "Dummy Regressor"

    STRATEGIES = ("mean", "median", "constant")

    def __init__(self, strategy: str = "mean", constant: float = 0.0):
        if strategy not in self.STRATEGIES:
            raise InvalidArgumentError(
                f"Strategy must be one of {', '.join(self.STRATEGIES)}, {strategy!r} given."
            )

        self.strategy = strategy
        self.constant = float(constant)

        self.value_: Optional[float] = None

    def estimator_type(self) -> EstimatorType:
        return EstimatorType.REGRESSOR

    def compatibility(self) -> List[DataType]:
        return [DataType.CONTINUOUS, DataType.CATEGORICAL]

    def params(self) -> Dict[str, Any]:
        return {"strategy": self.strategy, "constant": self.constant}

    def trained(self) -> bool:
        return self.value_ is not None

    def train(self, dataset: Dataset) -> None:
        specifications.dataset_is_labeled(dataset)
        specifications.dataset_is_not_empty(dataset)
        specifications.labels_are_compatible_with_learner(dataset, self)

        if self.strategy == "mean":
            self.value_ = float(np.mean(dataset.labels))
        elif self.strategy == "median":
            self.value_ = float(np.median(dataset.labels))
        else:
            self.value_ = self.constant

    def predict(self, dataset: Dataset) -> np.ndarray:
        if self.value_ is None:
            raise NotTrainedError()

        return np.full(dataset.num_rows(), self.value_, dtype=np.float64)
