"""
Unit tests for dataset containers.

Tests:
- Construction and validation of samples / labels
- Column type detection
- Row operations keep labels aligned with their samples
- Random operations are reproducible with a seed
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src directory to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from boostml.datasets import Labeled, Unlabeled
from boostml.enums import DataType
from boostml.exceptions import InvalidArgumentError


def make_dataset(n=10):
    """Row i is [i, 10 * i] with label i, so alignment is easy to verify."""
    X = np.column_stack([np.arange(n), 10 * np.arange(n)]).astype(float)
    y = np.arange(n, dtype=float)
    return Labeled(X, y)


def assert_aligned(dataset):
    np.testing.assert_array_equal(dataset.samples[:, 0], dataset.labels)


# =========================
# Construction
# =========================

class TestConstruction:

    def test_shape(self):
        dataset = make_dataset(7)
        assert dataset.shape() == (7, 2)
        assert len(dataset) == 7
        assert not dataset.empty()

    def test_empty(self):
        assert Labeled().empty()
        assert Unlabeled().shape() == (0, 0)

    def test_ragged_rows_rejected(self):
        with pytest.raises(InvalidArgumentError, match="offset 1"):
            Unlabeled([[1.0, 2.0], [3.0]])

    def test_label_count_must_match(self):
        with pytest.raises(InvalidArgumentError, match="3 samples and 2 labels"):
            Labeled([[1.0], [2.0], [3.0]], [1.0, 2.0])

    def test_numeric_lists_become_float_matrix(self):
        dataset = Unlabeled([[1, 2], [3, 4]])
        assert dataset.samples.dtype == np.float64

    def test_mixed_values_keep_object_dtype(self):
        dataset = Unlabeled([["red", 1.5], ["blue", 2.5]])
        assert dataset.samples.dtype == object
        assert dataset.column_types() == [DataType.CATEGORICAL, DataType.CONTINUOUS]

    def test_label_types(self):
        assert make_dataset().label_type() is DataType.CONTINUOUS
        assert Labeled([[1.0], [2.0]], ["a", "b"]).label_type() is DataType.CATEGORICAL

    def test_quick_preserves_row_correspondence(self):
        dataset = make_dataset(5)
        gradient = np.array([0.5, -1.0, 2.0, 0.0, 3.0])

        quick = Labeled.quick(dataset.samples, gradient)

        assert quick.samples is dataset.samples
        np.testing.assert_array_equal(quick.labels, gradient)

    def test_column(self):
        np.testing.assert_array_equal(make_dataset(3).column(1), [0.0, 10.0, 20.0])
        with pytest.raises(InvalidArgumentError):
            make_dataset(3).column(2)

    def test_detect(self):
        assert DataType.detect(3) is DataType.CONTINUOUS
        assert DataType.detect(np.float32(1.5)) is DataType.CONTINUOUS
        assert DataType.detect("3") is DataType.CATEGORICAL
        assert DataType.detect(True) is DataType.CATEGORICAL


# =========================
# Row operations
# =========================

class TestRowOperations:

    def test_split_sizes(self):
        left, right = make_dataset(10).split(0.25)
        assert left.num_rows() == 2
        assert right.num_rows() == 8
        assert_aligned(left)
        assert_aligned(right)

    def test_split_zero_ratio(self):
        left, right = make_dataset(10).split(0.0)
        assert left.empty()
        assert right.num_rows() == 10

    def test_split_invalid_ratio(self):
        with pytest.raises(InvalidArgumentError):
            make_dataset().split(1.5)

    def test_head_tail_slice(self):
        dataset = make_dataset(10)
        np.testing.assert_array_equal(dataset.head(3).labels, [0, 1, 2])
        np.testing.assert_array_equal(dataset.tail(2).labels, [8, 9])
        np.testing.assert_array_equal(dataset.slice(4, 3).labels, [4, 5, 6])

    def test_take_and_leave_are_destructive(self):
        dataset = make_dataset(10)

        taken = dataset.take(3)
        np.testing.assert_array_equal(taken.labels, [0, 1, 2])
        assert dataset.num_rows() == 7

        rest = dataset.leave(2)
        np.testing.assert_array_equal(dataset.labels, [3, 4])
        np.testing.assert_array_equal(rest.labels, [5, 6, 7, 8, 9])

    def test_fold_covers_every_row_once(self):
        folds = make_dataset(10).fold(3)
        assert [f.num_rows() for f in folds] == [4, 3, 3]
        labels = np.concatenate([f.labels for f in folds])
        np.testing.assert_array_equal(np.sort(labels), np.arange(10))

    def test_fold_requires_two(self):
        with pytest.raises(InvalidArgumentError):
            make_dataset().fold(1)

    def test_batch(self):
        batches = make_dataset(10).batch(4)
        assert [b.num_rows() for b in batches] == [4, 4, 2]

    def test_stack_and_append(self):
        a, b = make_dataset(3), make_dataset(2)
        stacked = Labeled.stack([a, b])
        assert stacked.num_rows() == 5
        assert_aligned(stacked)
        assert a.append(b).num_rows() == 5

    def test_stack_rejects_mismatched_columns(self):
        with pytest.raises(InvalidArgumentError):
            Unlabeled.stack([Unlabeled([[1.0]]), Unlabeled([[1.0, 2.0]])])


# =========================
# Random operations
# =========================

class TestRandomOperations:

    def test_randomize_is_in_place_and_aligned(self):
        dataset = make_dataset(20)
        returned = dataset.randomize(0)

        assert returned is dataset
        assert_aligned(dataset)
        assert not np.array_equal(dataset.labels, np.arange(20))
        np.testing.assert_array_equal(np.sort(dataset.labels), np.arange(20))

    def test_randomize_reproducible(self):
        a, b = make_dataset(20), make_dataset(20)
        a.randomize(7)
        b.randomize(np.random.default_rng(7))
        np.testing.assert_array_equal(a.labels, b.labels)

    def test_random_subset_without_replacement(self):
        subset = make_dataset(20).random_subset(8, 3)
        assert subset.num_rows() == 8
        assert len(np.unique(subset.labels)) == 8
        assert_aligned(subset)

    def test_random_subset_bounds(self):
        with pytest.raises(InvalidArgumentError, match="more than 5"):
            make_dataset(5).random_subset(6)
        with pytest.raises(InvalidArgumentError):
            make_dataset(5).random_subset(0)

    def test_random_subset_with_replacement(self):
        subset = make_dataset(3).random_subset_with_replacement(10, 0)
        assert subset.num_rows() == 10
        assert_aligned(subset)


class TestDescribe:

    def test_continuous_and_categorical_columns(self):
        dataset = Unlabeled([[1.0, "a"], [2.0, "b"], [3.0, "a"], [4.0, "a"]])
        report = dataset.describe()

        assert list(report.index) == [0, 1]
        assert report.loc[0, "mean"] == pytest.approx(2.5)
        assert report.loc[0, "median"] == pytest.approx(2.5)
        assert report.loc[1, "num categories"] == 2
        assert report.loc[1, "top"] == "a"
        assert report.loc[1, "top frequency"] == pytest.approx(0.75)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
