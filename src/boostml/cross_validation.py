"""
Cross validation strategies.

A validator trains a fresh clone of an estimator on part of a labeled
dataset and scores its predictions on the rest with a validation metric.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from . import specifications
from .datasets import Labeled
from .exceptions import InvalidArgumentError
from .learners.base import Learner
from .metrics import Metric
from .utils import check_random_state

logger = logging.getLogger(__name__)


class Validator(ABC):
    """Base class for validators."""

    def test(self, estimator: Learner, dataset: Labeled, metric: Metric) -> float:
        """
        Score an estimator on a labeled dataset.

        The estimator passed in is never trained itself; every round uses a
        clone, so a model that is already trained stays as it is.
        """
        specifications.dataset_is_labeled(dataset)
        specifications.dataset_is_not_empty(dataset)
        specifications.estimator_is_compatible_with_metric(estimator, metric)

        return self._test(estimator, dataset, metric)

    @abstractmethod
    def _test(self, estimator: Learner, dataset: Labeled, metric: Metric) -> float:
        pass

    @staticmethod
    def _score_split(estimator: Learner, training: Labeled, testing: Labeled, metric: Metric) -> float:
        model = estimator.clone()
        model.train(training)
        return metric.score(model.predict(testing), testing.labels)


class HoldOut(Validator):
    """
    Hold out a fraction of the shuffled dataset for testing.

    Parameters
    ----------
    ratio : float, default=0.2
        Fraction ∈ (0, 1) of rows used for testing.
    random_state : int, optional
        Seed for the shuffle.
    """

    def __init__(self, ratio: float = 0.2, random_state: Optional[int] = None):
        if ratio <= 0.0 or ratio >= 1.0:
            raise InvalidArgumentError(
                f"Ratio must be between 0 and 1, {ratio} given."
            )

        self.ratio = ratio
        self.random_state = random_state

    def _test(self, estimator: Learner, dataset: Labeled, metric: Metric) -> float:
        rng = check_random_state(self.random_state)

        testing, training = dataset.randomize(rng).split(self.ratio)

        if testing.empty() or training.empty():
            raise InvalidArgumentError(
                f"Hold out ratio {self.ratio} leaves an empty partition "
                f"for a dataset of {dataset.num_rows()} samples."
            )

        return self._score_split(estimator, training, testing, metric)

    def __str__(self) -> str:
        return f"Hold Out (ratio: {self.ratio})"


class KFold(Validator):
    """
    Average score over k train/test rounds, each fold used once for testing.

    Parameters
    ----------
    k : int, default=5
        Number of folds, at least 2.
    random_state : int, optional
        Seed for the shuffle.
    """

    def __init__(self, k: int = 5, random_state: Optional[int] = None):
        if k < 2:
            raise InvalidArgumentError(
                f"K must be greater than 1, {k} given."
            )

        self.k = k
        self.random_state = random_state

    def _test(self, estimator: Learner, dataset: Labeled, metric: Metric) -> float:
        rng = check_random_state(self.random_state)

        folds = dataset.randomize(rng).fold(self.k)

        scores = []

        for i, testing in enumerate(folds):
            training = Labeled.stack([fold for j, fold in enumerate(folds) if j != i])

            score = self._score_split(estimator, training, testing, metric)

            logger.debug(f"Fold {i + 1}/{self.k}: {metric}={score:.6f}")

            scores.append(score)

        return float(np.mean(scores))

    def __str__(self) -> str:
        return f"K Fold (k: {self.k})"


class MonteCarlo(Validator):
    """
    Average score over repeated random hold-out splits.

    Parameters
    ----------
    simulations : int, default=10
        Number of random splits, at least 2.
    ratio : float, default=0.2
        Fraction ∈ (0, 1) of rows used for testing in each simulation.
    random_state : int, optional
        Seed for the shuffles.
    """

    def __init__(self, simulations: int = 10, ratio: float = 0.2, random_state: Optional[int] = None):
        if simulations < 2:
            raise InvalidArgumentError(
                f"Must run at least 2 simulations, {simulations} given."
            )

        if ratio <= 0.0 or ratio >= 1.0:
            raise InvalidArgumentError(
                f"Ratio must be between 0 and 1, {ratio} given."
            )

        self.simulations = simulations
        self.ratio = ratio
        self.random_state = random_state

    def _test(self, estimator: Learner, dataset: Labeled, metric: Metric) -> float:
        rng = check_random_state(self.random_state)

        scores = []

        for _ in range(self.simulations):
            testing, training = dataset.randomize(rng).split(self.ratio)

            if testing.empty() or training.empty():
                raise InvalidArgumentError(
                    f"Ratio {self.ratio} leaves an empty partition "
                    f"for a dataset of {dataset.num_rows()} samples."
                )

            scores.append(self._score_split(estimator, training, testing, metric))

        return float(np.mean(scores))

    def __str__(self) -> str:
        return f"Monte Carlo (simulations: {self.simulations}, ratio: {self.ratio})"
