"""
Dataset containers.

A dataset is an ordered sequence of samples, each a fixed-length row of
continuous (real) or categorical (anything else) feature values. Labeled
datasets carry a parallel array of targets that always follows its rows
through every slicing, splitting and sampling operation.
"""

from abc import ABC, abstractmethod
from typing import Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from .enums import DataType
from .exceptions import InvalidArgumentError
from .utils import RandomState, check_random_state


def _to_matrix(samples) -> np.ndarray:
    """Coerce samples into a 2-D array (float when every value is real)."""
    if isinstance(samples, Dataset):
        return samples.samples.copy()

    if isinstance(samples, np.ndarray):
        if samples.ndim != 2:
            raise InvalidArgumentError(
                f"Samples must be a 2-dimensional array, {samples.ndim} dimensions given."
            )
        if samples.dtype.kind in "biuf":
            return samples.astype(np.float64)
        matrix = samples.astype(object)
    else:
        rows = [list(row) for row in samples]

        if not rows:
            return np.empty((0, 0), dtype=np.float64)

        n = len(rows[0])

        for offset, row in enumerate(rows):
            if len(row) != n:
                raise InvalidArgumentError(
                    f"Sample at offset {offset} must contain {n} features, {len(row)} given."
                )

        matrix = np.empty((len(rows), n), dtype=object)

        for offset, row in enumerate(rows):
            matrix[offset, :] = row

    if all(DataType.detect(value) is DataType.CONTINUOUS for value in matrix.flat):
        return matrix.astype(np.float64)

    return matrix


def _to_labels(labels) -> np.ndarray:
    labels = np.asarray(list(labels) if not isinstance(labels, np.ndarray) else labels)

    if labels.ndim != 1:
        labels = labels.ravel()

    if labels.dtype.kind in "biuf":
        return labels.astype(np.float64)

    return labels.astype(object)


class Dataset(ABC):
    """
    Base class for datasets.

    Parameters
    ----------
    samples : array-like, shape (n_samples, n_features)
        Rows of feature values.
    """

    def __init__(self, samples=()):
        self._samples = _to_matrix(samples)

    @classmethod
    @abstractmethod
    def stack(cls, datasets: Sequence["Dataset"]) -> "Dataset":
        """Stack a number of datasets on top of each other."""

    @abstractmethod
    def _select(self, indices: np.ndarray) -> "Dataset":
        """Return a new dataset containing the rows at the given offsets."""

    @abstractmethod
    def _keep(self, indices: np.ndarray) -> None:
        """Keep only the rows at the given offsets, in that order."""

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def samples(self) -> np.ndarray:
        return self._samples

    def num_rows(self) -> int:
        return self._samples.shape[0]

    def num_columns(self) -> int:
        return self._samples.shape[1] if self._samples.ndim == 2 else 0

    def shape(self) -> Tuple[int, int]:
        return self.num_rows(), self.num_columns()

    def empty(self) -> bool:
        return self.num_rows() == 0

    def column(self, offset: int) -> np.ndarray:
        if offset < 0 or offset >= self.num_columns():
            raise InvalidArgumentError(
                f"Column offset must be between 0 and {self.num_columns() - 1}, {offset} given."
            )
        return self._samples[:, offset]

    def column_type(self, offset: int) -> DataType:
        """Type of a column, determined from its first value."""
        if self.empty():
            raise InvalidArgumentError("Cannot determine the type of a column of an empty dataset.")
        if self._samples.dtype.kind == "f":
            return DataType.CONTINUOUS
        return DataType.detect(self.column(offset)[0])

    def column_types(self) -> List[DataType]:
        return [self.column_type(offset) for offset in range(self.num_columns())]

    def feature_types(self) -> List[DataType]:
        return self.column_types()

    def describe(self) -> pd.DataFrame:
        """
        Per-column summary statistics.

        Continuous columns report moments and quantiles, categorical columns
        report their number of categories and the most frequent one.
        """
        records = []

        for offset, data_type in enumerate(self.column_types()):
            values = self.column(offset)

            if data_type is DataType.CONTINUOUS:
                values = values.astype(np.float64)
                q1, median, q3 = np.percentile(values, [25, 50, 75])
                records.append({
                    "column": offset,
                    "type": str(data_type),
                    "mean": float(np.mean(values)),
                    "std": float(np.std(values)),
                    "skewness": float(stats.skew(values)) if len(values) > 2 else np.nan,
                    "kurtosis": float(stats.kurtosis(values)) if len(values) > 3 else np.nan,
                    "min": float(np.min(values)),
                    "25%": float(q1),
                    "median": float(median),
                    "75%": float(q3),
                    "max": float(np.max(values)),
                })
            else:
                categories, counts = np.unique(values.astype(str), return_counts=True)
                records.append({
                    "column": offset,
                    "type": str(data_type),
                    "num categories": len(categories),
                    "top": categories[np.argmax(counts)],
                    "top frequency": float(np.max(counts) / len(values)),
                })

        return pd.DataFrame.from_records(records).set_index("column")

    # ------------------------------------------------------------------
    # Row operations
    # ------------------------------------------------------------------

    def head(self, n: int = 10) -> "Dataset":
        self._check_positive(n)
        return self._select(np.arange(min(n, self.num_rows())))

    def tail(self, n: int = 10) -> "Dataset":
        self._check_positive(n)
        m = self.num_rows()
        return self._select(np.arange(max(0, m - n), m))

    def take(self, n: int = 1) -> "Dataset":
        """Remove the first n rows from this dataset and return them."""
        self._check_positive(n)
        taken = self.head(n)
        self._keep(np.arange(min(n, self.num_rows()), self.num_rows()))
        return taken

    def leave(self, n: int = 1) -> "Dataset":
        """Leave the first n rows on this dataset and return the rest."""
        self._check_positive(n)
        rest = self._select(np.arange(min(n, self.num_rows()), self.num_rows()))
        self._keep(np.arange(min(n, self.num_rows())))
        return rest

    def slice(self, offset: int, n: int) -> "Dataset":
        if offset < 0:
            raise InvalidArgumentError(f"Offset cannot be less than 0, {offset} given.")
        self._check_positive(n)
        stop = min(offset + n, self.num_rows())
        return self._select(np.arange(min(offset, stop), stop))

    def split(self, ratio: float = 0.5) -> Tuple["Dataset", "Dataset"]:
        """
        Split into two datasets by row count.

        The left dataset receives floor(ratio * n) rows, the right one the rest.
        """
        if ratio < 0.0 or ratio > 1.0:
            raise InvalidArgumentError(f"Ratio must be between 0 and 1, {ratio} given.")

        n = int(np.floor(ratio * self.num_rows()))
        indices = np.arange(self.num_rows())

        return self._select(indices[:n]), self._select(indices[n:])

    def fold(self, k: int = 3) -> List["Dataset"]:
        """Partition into k folds of (nearly) equal size."""
        if k < 2:
            raise InvalidArgumentError(f"Cannot create less than 2 folds, {k} given.")
        if k > self.num_rows():
            raise InvalidArgumentError(
                f"Cannot create {k} folds from {self.num_rows()} samples."
            )
        return [self._select(chunk) for chunk in np.array_split(np.arange(self.num_rows()), k)]

    def batch(self, n: int = 50) -> List["Dataset"]:
        self._check_positive(n)
        indices = np.arange(self.num_rows())
        return [self._select(indices[i:i + n]) for i in range(0, self.num_rows(), n)]

    def randomize(self, random_state: RandomState = None) -> "Dataset":
        """Shuffle the rows in place and return self."""
        rng = check_random_state(random_state)
        self._keep(rng.permutation(self.num_rows()))
        return self

    def random_subset(self, n: int, random_state: RandomState = None) -> "Dataset":
        """Random subset of n rows drawn without replacement."""
        if n < 1:
            raise InvalidArgumentError(f"Cannot generate subset of less than 1 sample, {n} given.")
        if n > self.num_rows():
            raise InvalidArgumentError(
                f"Cannot generate subset of more than {self.num_rows()} samples, {n} given."
            )
        rng = check_random_state(random_state)
        return self._select(rng.choice(self.num_rows(), size=n, replace=False))

    def random_subset_with_replacement(self, n: int, random_state: RandomState = None) -> "Dataset":
        if n < 1:
            raise InvalidArgumentError(f"Cannot generate subset of less than 1 sample, {n} given.")
        if self.empty():
            raise InvalidArgumentError("Cannot sample from an empty dataset.")
        rng = check_random_state(random_state)
        return self._select(rng.integers(0, self.num_rows(), size=n))

    def append(self, dataset: "Dataset") -> "Dataset":
        return type(self).stack([self, dataset])

    # ------------------------------------------------------------------

    def _check_positive(self, n: int) -> None:
        if n < 1:
            raise InvalidArgumentError(f"N must be greater than 0, {n} given.")

    def __len__(self) -> int:
        return self.num_rows()

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._samples)

    def __getitem__(self, offset: int) -> np.ndarray:
        return self._samples[offset]


class Unlabeled(Dataset):
    """Dataset of samples without targets, e.g. the input to ``predict``."""

    @classmethod
    def stack(cls, datasets: Sequence[Dataset]) -> "Unlabeled":
        datasets = [d for d in datasets if not d.empty()]
        if not datasets:
            return cls()
        _check_stackable(datasets)
        return cls(np.vstack([d.samples for d in datasets]))

    def _select(self, indices: np.ndarray) -> "Unlabeled":
        subset = Unlabeled.__new__(Unlabeled)
        subset._samples = self._samples[indices]
        return subset

    def _keep(self, indices: np.ndarray) -> None:
        self._samples = self._samples[indices]

    def __repr__(self) -> str:
        return f"Unlabeled(shape={self.shape()})"


class Labeled(Dataset):
    """
    Dataset of samples paired with targets.

    Parameters
    ----------
    samples : array-like, shape (n_samples, n_features)
        Rows of feature values.
    labels : array-like, shape (n_samples,)
        One target per row. Real-valued targets are stored as floats.
    """

    def __init__(self, samples=(), labels=()):
        super().__init__(samples)
        self._labels = _to_labels(labels)

        if len(self._labels) != self.num_rows():
            raise InvalidArgumentError(
                f"Number of labels must equal the number of samples, "
                f"{self.num_rows()} samples and {len(self._labels)} labels given."
            )

    @classmethod
    def quick(cls, samples: np.ndarray, labels: np.ndarray) -> "Labeled":
        """Build without validation or copying; row i keeps label i."""
        dataset = cls.__new__(cls)
        dataset._samples = samples
        dataset._labels = labels
        return dataset

    @classmethod
    def stack(cls, datasets: Sequence[Dataset]) -> "Labeled":
        for dataset in datasets:
            if not isinstance(dataset, Labeled):
                raise InvalidArgumentError(
                    f"Dataset must be an instance of Labeled, {type(dataset).__name__} given."
                )
        datasets = [d for d in datasets if not d.empty()]
        if not datasets:
            return cls()
        _check_stackable(datasets)
        return cls(
            np.vstack([d.samples for d in datasets]),
            np.concatenate([d.labels for d in datasets]),
        )

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    def label_type(self) -> DataType:
        if self.empty():
            raise InvalidArgumentError("Cannot determine the label type of an empty dataset.")
        if self._labels.dtype.kind == "f":
            return DataType.CONTINUOUS
        return DataType.detect(self._labels[0])

    def _select(self, indices: np.ndarray) -> "Labeled":
        return Labeled.quick(self._samples[indices], self._labels[indices])

    def _keep(self, indices: np.ndarray) -> None:
        self._samples = self._samples[indices]
        self._labels = self._labels[indices]

    def __repr__(self) -> str:
        return f"Labeled(shape={self.shape()})"


def _check_stackable(datasets: Sequence[Dataset]) -> None:
    n = datasets[0].num_columns()
    for dataset in datasets[1:]:
        if dataset.num_columns() != n:
            raise InvalidArgumentError(
                f"Dataset must have {n} columns, {dataset.num_columns()} given."
            )
