"""
Exception hierarchy for boostml.

Every error derives from the builtin type callers already expect
(``ValueError`` for bad input, ``RuntimeError`` for bad state) so that
``except ValueError`` keeps working around library calls.
"""


class BoostMLError(Exception):
    """Base class for all library errors."""


class InvalidArgumentError(BoostMLError, ValueError):
    """A hyperparameter, dataset or collaborator is not acceptable."""


class DimensionalityMismatchError(InvalidArgumentError):
    """Dataset column count differs from the one the estimator was trained on."""

    def __init__(self, expected: int, given: int):
        super().__init__(
            f"Dataset must have dimensionality {expected}, {given} given."
        )
        self.expected = expected
        self.given = given


class NotTrainedError(BoostMLError, RuntimeError):
    """Estimator has to be trained before it can make predictions."""

    def __init__(self, message: str = "Estimator has not been trained."):
        super().__init__(message)


class PersistenceError(BoostMLError, RuntimeError):
    """A model could not be written to or read back from storage."""
