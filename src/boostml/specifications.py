"""
Precondition checks shared by learners, metrics and validators.

Each check raises InvalidArgumentError (or DimensionalityMismatchError)
with the offending value in the message and returns nothing otherwise.
"""

from .datasets import Dataset, Labeled
from .enums import DataType, EstimatorType
from .exceptions import DimensionalityMismatchError, InvalidArgumentError


def dataset_is_labeled(dataset: Dataset) -> None:
    if not isinstance(dataset, Labeled):
        raise InvalidArgumentError(
            f"Dataset must be labeled, {type(dataset).__name__} given."
        )


def dataset_is_not_empty(dataset: Dataset) -> None:
    if dataset.empty():
        raise InvalidArgumentError("Dataset must contain at least one sample.")


def dataset_has_dimensionality(dataset: Dataset, dimensions: int) -> None:
    if dataset.num_columns() != dimensions:
        raise DimensionalityMismatchError(dimensions, dataset.num_columns())


def samples_are_compatible_with_estimator(dataset: Dataset, estimator) -> None:
    compatibility = estimator.compatibility()

    for offset, data_type in enumerate(dataset.feature_types()):
        if data_type not in compatibility:
            accepted = ", ".join(str(t) for t in compatibility)
            raise InvalidArgumentError(
                f"{estimator} is only compatible with {accepted} data types, "
                f"{data_type} given at column {offset}."
            )


def labels_are_compatible_with_learner(dataset: Labeled, estimator) -> None:
    if estimator.estimator_type() is EstimatorType.REGRESSOR:
        if dataset.label_type() is not DataType.CONTINUOUS:
            raise InvalidArgumentError(
                f"Regressors require continuous labels, {dataset.label_type()} given."
            )


def estimator_is_compatible_with_metric(estimator, metric) -> None:
    if estimator.estimator_type() not in metric.compatibility():
        raise InvalidArgumentError(
            f"{metric} is not compatible with {estimator.estimator_type()}s."
        )
