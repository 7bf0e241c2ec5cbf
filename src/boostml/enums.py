"""
Enumerations shared across datasets, learners and metrics.
"""

from enum import Enum
from numbers import Real


class DataType(Enum):
    """High-level type of a feature column or a label."""

    CONTINUOUS = "continuous"
    CATEGORICAL = "categorical"

    @classmethod
    def detect(cls, value) -> "DataType":
        """Infer the data type of a single value (real numbers are continuous)."""
        if isinstance(value, Real) and not isinstance(value, bool):
            return cls.CONTINUOUS
        return cls.CATEGORICAL

    def __str__(self) -> str:
        return self.value


class EstimatorType(Enum):
    """Kind of output an estimator produces."""

    REGRESSOR = "regressor"
    CLASSIFIER = "classifier"
    CLUSTERER = "clusterer"
    ANOMALY_DETECTOR = "anomaly detector"

    def __str__(self) -> str:
        return self.value
