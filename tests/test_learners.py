"""
Unit tests for the base and weak learners.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from sklearn.datasets import make_regression
from sklearn.tree import DecisionTreeRegressor

# Add src directory to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from boostml.datasets import Labeled, Unlabeled
from boostml.enums import DataType, EstimatorType
from boostml.exceptions import InvalidArgumentError, NotTrainedError
from boostml.learners import DummyRegressor, ExtraTreeRegressor, RegressionTree
from boostml.learners.trees import CARTRegressor
from boostml.regressors import GradientBoost


# =========================
# DummyRegressor
# =========================

class TestDummyRegressor:

    def test_mean_strategy(self):
        dataset = Labeled([[1.0], [2.0], [3.0]], [1.0, 2.0, 6.0])
        dummy = DummyRegressor()
        dummy.train(dataset)

        np.testing.assert_allclose(dummy.predict(Unlabeled([[0.0], [5.0]])), [3.0, 3.0])

    def test_median_strategy(self):
        dataset = Labeled([[1.0], [2.0], [3.0]], [1.0, 2.0, 6.0])
        dummy = DummyRegressor("median")
        dummy.train(dataset)
        assert dummy.value_ == 2.0

    def test_constant_strategy(self):
        dummy = DummyRegressor("constant", constant=-1.5)
        dummy.train(Labeled([[1.0]], [10.0]))
        np.testing.assert_array_equal(dummy.predict(Unlabeled([[1.0], [2.0]])), [-1.5, -1.5])

    def test_accepts_categorical_features(self):
        dummy = DummyRegressor()
        dummy.train(Labeled([["a"], ["b"]], [1.0, 3.0]))
        assert dummy.value_ == 2.0
        assert DataType.CATEGORICAL in dummy.compatibility()

    def test_invalid_strategy(self):
        with pytest.raises(InvalidArgumentError, match="'mode'"):
            DummyRegressor("mode")

    def test_predict_before_train(self):
        with pytest.raises(NotTrainedError):
            DummyRegressor().predict(Unlabeled([[1.0]]))

    def test_clone_is_untrained(self):
        dummy = DummyRegressor("median")
        dummy.train(Labeled([[1.0]], [1.0]))
        copy = dummy.clone()
        assert copy.strategy == "median"
        assert not copy.trained()


# =========================
# Regression trees
# =========================

class TestRegressionTree:

    def test_matches_sklearn_tree(self):
        X, y = make_regression(n_samples=80, n_features=5, random_state=0)

        tree = RegressionTree(max_height=3, random_state=0)
        tree.train(Labeled(X, y))

        dt = DecisionTreeRegressor(max_depth=3, random_state=0).fit(X, y)

        np.testing.assert_allclose(tree.predict(Unlabeled(X)), dt.predict(X), rtol=1e-12)

    def test_feature_importances_normalised(self):
        X, y = make_regression(n_samples=80, n_features=5, random_state=1)
        tree = RegressionTree(max_height=4, random_state=0)
        tree.train(Labeled(X, y))

        importances = tree.feature_importances()
        assert importances.shape == (5,)
        assert np.all(importances >= 0.0)
        assert importances.sum() == pytest.approx(1.0)

    def test_stump_on_constant_target_has_zero_importances(self):
        X = np.arange(10, dtype=float).reshape(-1, 2)
        tree = RegressionTree(max_height=3)
        tree.train(Labeled(X, np.ones(5)))
        np.testing.assert_array_equal(tree.feature_importances(), [0.0, 0.0])

    def test_rejects_categorical_features(self):
        with pytest.raises(InvalidArgumentError, match="categorical"):
            RegressionTree().train(Labeled([["a"], ["b"]], [1.0, 2.0]))

    def test_dimensionality_checked_on_predict(self):
        tree = RegressionTree(max_height=2)
        tree.train(Labeled(np.ones((4, 3)), np.arange(4.0)))
        with pytest.raises(InvalidArgumentError):
            tree.predict(Unlabeled(np.ones((2, 2))))

    @pytest.mark.parametrize("kwargs", [
        {"max_height": 0},
        {"min_leaf_size": 0},
        {"max_features": 0},
        {"min_purity_increase": -1.0},
    ])
    def test_invalid_hyperparameters(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            RegressionTree(**kwargs)

    def test_clone_preserves_hyperparameters(self):
        tree = RegressionTree(max_height=5, min_leaf_size=3, random_state=7)
        tree.train(Labeled(np.arange(20.0).reshape(-1, 1), np.arange(20.0)))

        copy = tree.clone()

        assert copy is not tree
        assert copy.params() == tree.params()
        assert not copy.trained()

    def test_estimator_type(self):
        assert RegressionTree().estimator_type() is EstimatorType.REGRESSOR
        assert RegressionTree().compatibility() == [DataType.CONTINUOUS]


class TestExtraTreeRegressor:

    def test_train_and_predict(self):
        X, y = make_regression(n_samples=60, n_features=3, random_state=2)
        tree = ExtraTreeRegressor(max_height=4, random_state=0)
        tree.train(Labeled(X, y))

        assert tree.predict(Unlabeled(X)).shape == (60,)
        assert tree.feature_importances().shape == (3,)

    def test_str(self):
        assert str(ExtraTreeRegressor(max_height=2)).startswith("Extra Tree Regressor (max_height: 2")


# =========================
# Shared behaviour
# =========================

class TestCARTRegressor:

    def test_cannot_instantiate_without_tree_builder(self):
        with pytest.raises(TypeError):
            CARTRegressor()


class TestRevision:

    def test_same_hyperparameters_same_revision(self):
        assert RegressionTree(max_height=3).revision() == RegressionTree(max_height=3).revision()
        assert DummyRegressor("median").revision() == DummyRegressor("median").revision()

    def test_changes_with_hyperparameters(self):
        assert RegressionTree(max_height=3).revision() != RegressionTree(max_height=4).revision()
        assert DummyRegressor("mean").revision() != DummyRegressor("median").revision()
        assert GradientBoost(rate=0.1).revision() != GradientBoost(rate=0.2).revision()

    def test_changes_with_class(self):
        assert RegressionTree(max_height=3).revision() != ExtraTreeRegressor(max_height=3).revision()

    def test_changes_with_nested_learner(self):
        a = GradientBoost(booster=RegressionTree(max_height=2))
        b = GradientBoost(booster=RegressionTree(max_height=5))
        assert a.revision() != b.revision()

    def test_unaffected_by_training(self):
        X, y = make_regression(n_samples=30, n_features=2, random_state=0)
        tree = RegressionTree(max_height=2, random_state=0)
        before = tree.revision()
        tree.train(Labeled(X, y))

        assert tree.revision() == before
        assert len(before) == 8


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
