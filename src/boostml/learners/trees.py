"""
CART regression trees used as boosters.

Thin learners around ``sklearn.tree`` regressors that speak the dataset
interface of this package and expose normalised feature importances.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np
from sklearn.tree import DecisionTreeRegressor
from sklearn.tree import ExtraTreeRegressor as _ExtraTreeRegressor

from .. import specifications
from ..datasets import Dataset
from ..enums import DataType, EstimatorType
from ..exceptions import InvalidArgumentError, NotTrainedError
from .base import Learner, Persistable, RanksFeatures


class CARTRegressor(Learner, RanksFeatures, Persistable):
    """
    Base class for binary regression trees fit by variance reduction.

    Parameters
    ----------
    max_height : int, optional
        Maximum depth of the tree; None grows until leaves are pure.
    min_leaf_size : int, default=1
        Minimum samples required in a leaf node.
    max_features : int, optional
        Number of features considered per split; None uses all of them.
    min_purity_increase : float, default=0.0
        Minimum decrease in impurity required to split a node.
    random_state : int, optional
        Random seed for reproducibility.
    """

    def __init__(
        self,
        max_height: Optional[int] = None,
        min_leaf_size: int = 1,
        max_features: Optional[int] = None,
        min_purity_increase: float = 0.0,
        random_state: Optional[int] = None
    ):
        if max_height is not None and max_height < 1:
            raise InvalidArgumentError(
                f"Tree must have depth greater than 0, {max_height} given."
            )

        if min_leaf_size < 1:
            raise InvalidArgumentError(
                f"At least one sample is required to form a leaf node, {min_leaf_size} given."
            )

        if max_features is not None and max_features < 1:
            raise InvalidArgumentError(
                f"Tree must consider at least 1 feature to determine a split, {max_features} given."
            )

        if min_purity_increase < 0.0:
            raise InvalidArgumentError(
                f"Min purity increase must be greater than or equal to 0, {min_purity_increase} given."
            )

        self.max_height = max_height
        self.min_leaf_size = min_leaf_size
        self.max_features = max_features
        self.min_purity_increase = min_purity_increase
        self.random_state = random_state

        self.tree_ = None
        self.feature_count_: Optional[int] = None

    @abstractmethod
    def _build_tree(self):
        """Untrained sklearn estimator configured from the hyperparameters."""

    def estimator_type(self) -> EstimatorType:
        return EstimatorType.REGRESSOR

    def compatibility(self) -> List[DataType]:
        return [DataType.CONTINUOUS]

    def params(self) -> Dict[str, Any]:
        return {
            "max_height": self.max_height,
            "min_leaf_size": self.min_leaf_size,
            "max_features": self.max_features,
            "min_purity_increase": self.min_purity_increase,
            "random_state": self.random_state,
        }

    def trained(self) -> bool:
        return self.tree_ is not None

    def train(self, dataset: Dataset) -> None:
        specifications.dataset_is_labeled(dataset)
        specifications.dataset_is_not_empty(dataset)
        specifications.samples_are_compatible_with_estimator(dataset, self)
        specifications.labels_are_compatible_with_learner(dataset, self)

        X = dataset.samples.astype(np.float64)
        y = dataset.labels.astype(np.float64)

        tree = self._build_tree()
        tree.fit(X, y)

        self.tree_ = tree
        self.feature_count_ = dataset.num_columns()

    def predict(self, dataset: Dataset) -> np.ndarray:
        if self.tree_ is None:
            raise NotTrainedError()

        specifications.dataset_has_dimensionality(dataset, self.feature_count_)

        return self.tree_.predict(dataset.samples.astype(np.float64))

    def feature_importances(self) -> np.ndarray:
        """Impurity-based importances, summing to 1 (all zeros for a stump with no split)."""
        if self.tree_ is None:
            raise NotTrainedError()

        return np.asarray(self.tree_.feature_importances_, dtype=np.float64)


class RegressionTree(CARTRegressor):
    """Greedy CART regression tree (best split over the considered features)."""

    NAME = "Regression Tree"

    def _build_tree(self) -> DecisionTreeRegressor:
        return DecisionTreeRegressor(
            max_depth=self.max_height,
            min_samples_leaf=self.min_leaf_size,
            max_features=self.max_features,
            min_impurity_decrease=self.min_purity_increase,
            random_state=self.random_state,
        )


class ExtraTreeRegressor(CARTRegressor):
    """Extremely randomised regression tree (random thresholds per feature)."""

    NAME = "Extra Tree Regressor"

    def _build_tree(self) -> _ExtraTreeRegressor:
        return _ExtraTreeRegressor(
            max_depth=self.max_height,
            min_samples_leaf=self.min_leaf_size,
            max_features=self.max_features,
            min_impurity_decrease=self.min_purity_increase,
            random_state=self.random_state,
        )
