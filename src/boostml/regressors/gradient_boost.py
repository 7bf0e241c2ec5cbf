"""
Stage-wise gradient boosting for regression.

Implements stochastic gradient boosting with squared-error loss, shrinkage
(learning rate), hold-out validation with early stopping and rollback to the
best validated epoch.

References:
- Friedman, J. H. (2001). Greedy function approximation: A gradient boosting machine.
  Annals of Statistics, 29(5), 1189-1232.
- Friedman, J. H. (1999). Stochastic gradient boosting.
- Wei, Y. et al. (2017). Early stopping for kernel boosting algorithms:
  A general analysis with localized complexities.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .. import specifications
from ..datasets import Dataset, Labeled
from ..enums import DataType, EstimatorType
from ..exceptions import InvalidArgumentError, NotTrainedError
from ..learners.base import Learner, Persistable, RanksFeatures, Verbose
from ..learners.dummy import DummyRegressor
from ..learners.trees import ExtraTreeRegressor, RegressionTree
from ..metrics import RMSE, Metric
from ..utils import (
    check_random_state, half_up_round, l2_loss,
    squared_error_negative_gradient, update_output
)


@dataclass
class TrainingState:
    """Transient bookkeeping owned by a single call to ``GradientBoost.train``."""

    best_score: float
    out: Optional[np.ndarray] = None
    prev_out: Optional[np.ndarray] = None
    prev_out_test: Optional[np.ndarray] = None
    ensemble: List[Learner] = field(default_factory=list)
    losses: Dict[int, float] = field(default_factory=dict)
    scores: Dict[int, float] = field(default_factory=dict)
    best_epoch: int = 0
    stagnant_epochs: int = 0
    previous_loss: float = math.inf


class GradientBoost(Learner, RanksFeatures, Verbose, Persistable):
    """
    Gradient Boost regressor.

    A stage-wise additive ensemble that trains boosters (regression trees)
    to correct the residuals of a weak base learner:

    1. Initialisation: f_0(x) = base learner (mean of y by default).
    2. For m = 1 to M:
       a. Pseudo-residuals: r_im = y_i - f_{m-1}(x_i).
       b. Fit a fresh booster h_m to a random subsample of {(x_i, r_im)}.
       c. Update: f_m(x) = f_{m-1}(x) + ν * h_m(x).
       d. Score f_m on the hold-out set and stop early on a plateau,
          a perfect score or a converged training loss.
    3. Roll back to the epoch with the best validation score.

    Parameters
    ----------
    booster : RegressionTree or ExtraTreeRegressor, optional
        Weak learner trained on the residuals each round. Defaults to a
        regression tree of height 3.
    rate : float, default=0.1
        Shrinkage ν ∈ (0, 1] applied to every booster's contribution.
    ratio : float, default=0.5
        Fraction ∈ (0, 1] of training rows subsampled for each booster.
    estimators : int, default=1000
        Maximum number of boosting rounds (M).
    min_change : float, default=1e-4
        Minimum change in training loss required to keep going.
    window : int, default=10
        Epochs without validation improvement tolerated before stopping.
    hold_out : float, default=0.1
        Fraction ∈ [0, 0.5] of rows held out for validation; 0 disables
        scoring, early stopping on plateau and rollback.
    metric : Metric, optional
        Validation metric. Defaults to RMSE.
    base : Learner, optional
        Regressor providing the initial prediction. Defaults to a dummy
        regressor predicting the mean.
    random_state : int, optional
        Seed for the shuffle and the per-round subsamples.
    """

    NAME = "Gradient Boost"

    COMPATIBLE_BOOSTERS = (RegressionTree, ExtraTreeRegressor)

    MIN_SUBSAMPLE = 1

    def __init__(
        self,
        booster: Optional[Learner] = None,
        rate: float = 0.1,
        ratio: float = 0.5,
        estimators: int = 1000,
        min_change: float = 1e-4,
        window: int = 10,
        hold_out: float = 0.1,
        metric: Optional[Metric] = None,
        base: Optional[Learner] = None,
        random_state: Optional[int] = None
    ):
        if booster is not None and not isinstance(booster, self.COMPATIBLE_BOOSTERS):
            raise InvalidArgumentError(
                f"Booster is not compatible with the ensemble, "
                f"{type(booster).__name__} given."
            )

        if rate <= 0.0 or rate > 1.0:
            raise InvalidArgumentError(
                f"Learning rate must be greater than 0 and at most 1, {rate} given."
            )

        if ratio <= 0.0 or ratio > 1.0:
            raise InvalidArgumentError(
                f"Ratio must be greater than 0 and at most 1, {ratio} given."
            )

        if estimators < 1:
            raise InvalidArgumentError(
                f"Number of estimators must be greater than 0, {estimators} given."
            )

        if min_change < 0.0:
            raise InvalidArgumentError(
                f"Minimum change must be greater than or equal to 0, {min_change} given."
            )

        if window < 1:
            raise InvalidArgumentError(
                f"Window must be greater than 0, {window} given."
            )

        if hold_out < 0.0 or hold_out > 0.5:
            raise InvalidArgumentError(
                f"Hold out ratio must be between 0 and 0.5, {hold_out} given."
            )

        if metric is not None:
            specifications.estimator_is_compatible_with_metric(self, metric)

        if base is not None and base.estimator_type() is not EstimatorType.REGRESSOR:
            raise InvalidArgumentError(
                f"Base estimator must be a regressor, {base.estimator_type()} given."
            )

        self.booster = booster if booster is not None else RegressionTree(max_height=3)
        self.rate = rate
        self.ratio = ratio
        self.estimators = estimators
        self.min_change = min_change
        self.window = window
        self.hold_out = hold_out
        self.metric = metric if metric is not None else RMSE()
        self.base = base if base is not None else DummyRegressor("mean")
        self.random_state = random_state

        # Model state
        self.base_: Optional[Learner] = None
        self.ensemble_: List[Learner] = []
        self.feature_count_: Optional[int] = None

        # Training history of the last session
        self.losses_: Optional[Dict[int, float]] = None
        self.scores_: Optional[Dict[int, float]] = None

    def estimator_type(self) -> EstimatorType:
        return EstimatorType.REGRESSOR

    def compatibility(self) -> List[DataType]:
        base = self.base.compatibility()
        return [t for t in self.booster.compatibility() if t in base]

    def params(self) -> Dict[str, Any]:
        return {
            "booster": self.booster,
            "rate": self.rate,
            "ratio": self.ratio,
            "estimators": self.estimators,
            "min_change": self.min_change,
            "window": self.window,
            "hold_out": self.hold_out,
            "metric": self.metric,
            "base": self.base,
            "random_state": self.random_state,
        }

    def trained(self) -> bool:
        return self.base_ is not None and self.base_.trained() and bool(self.ensemble_)

    def steps(self) -> Iterator[Dict[str, Any]]:
        """Progress table of the last training session, one row per epoch."""
        if not self.losses_:
            return

        for epoch, loss in self.losses_.items():
            yield {
                "epoch": epoch,
                "score": (self.scores_ or {}).get(epoch),
                "loss": loss,
            }

    def _subsample_size(self, n_samples: int) -> int:
        """Rows drawn for each booster: max(1, round(ratio * n))."""
        return max(self.MIN_SUBSAMPLE, half_up_round(self.ratio * n_samples))

    def train(self, dataset: Labeled) -> None:
        """
        Train the ensemble on a labeled dataset.

        The dataset is shuffled in place before being split into a
        validation and a training partition. Model state is only replaced
        once training finishes, so a failed precondition leaves a previously
        trained model untouched.

        Args:
            dataset: Labeled dataset with continuous labels.
        """
        specifications.dataset_is_labeled(dataset)
        specifications.dataset_is_not_empty(dataset)
        specifications.samples_are_compatible_with_estimator(dataset, self)
        specifications.labels_are_compatible_with_learner(dataset, self)

        self._log(f"{self} initialized")

        rng = check_random_state(self.random_state)

        testing, training = dataset.randomize(rng).split(self.hold_out)

        n_samples = training.num_rows()
        targets = training.labels

        self._log(f"Training {self.base}")

        base = self.base.clone()
        base.train(training)

        state = TrainingState(best_score=self.metric.worst())

        state.prev_out = state.out = base.predict(training).astype(np.float64)

        if not testing.empty():
            state.prev_out_test = base.predict(testing).astype(np.float64)

        p = self._subsample_size(n_samples)

        for epoch in range(1, self.estimators + 1):
            booster = self.booster.clone()

            if booster.random_state is None:
                booster.random_state = int(rng.integers(2**32))

            gradient = squared_error_negative_gradient(targets, state.out)

            loss = l2_loss(gradient)

            if not np.isfinite(loss):
                self._log("Numerical instability detected")
                break

            residuals = Labeled.quick(training.samples, gradient)

            subset = residuals.random_subset(p, rng)

            booster.train(subset)

            predictions = booster.predict(residuals)

            state.out = update_output(predictions, state.prev_out, self.rate)

            state.losses[epoch] = loss
            state.ensemble.append(booster)

            score = None

            if state.prev_out_test is not None:
                predictions = booster.predict(testing)

                out_test = update_output(predictions, state.prev_out_test, self.rate)

                score = self.metric.score(out_test, testing.labels)

                state.scores[epoch] = score

            self._log(
                f"Epoch {epoch} - {self.metric}: "
                f"{score if score is not None else 'n/a'}, L2 Loss: {loss}"
            )

            if score is not None:
                if self.metric.is_perfect(score):
                    break

                if self.metric.is_improvement(score, state.best_score):
                    state.best_score = score
                    state.best_epoch = epoch
                    state.stagnant_epochs = 0
                else:
                    state.stagnant_epochs += 1

                if state.stagnant_epochs >= self.window:
                    break

                state.prev_out_test = out_test

            if abs(state.previous_loss - loss) < self.min_change:
                break

            state.prev_out = state.out
            state.previous_loss = loss

        if state.scores:
            last_score = list(state.scores.values())[-1]

            if not self.metric.is_improvement(last_score, state.best_score):
                del state.ensemble[state.best_epoch:]

                self._log(f"Model state restored to epoch {state.best_epoch}")

        self.base_ = base
        self.ensemble_ = state.ensemble
        self.feature_count_ = training.num_columns()
        self.losses_ = state.losses
        self.scores_ = state.scores

        self._log("Training complete")

    def _check_trained(self) -> None:
        if not self.ensemble_ or not self.feature_count_:
            raise NotTrainedError()

    def predict(self, dataset: Dataset) -> np.ndarray:
        """
        Predict regression targets.

        Returns base(x) + ν * Σ_m h_m(x), one value per row in row order.
        """
        self._check_trained()

        specifications.dataset_has_dimensionality(dataset, self.feature_count_)

        out = np.array(self.base_.predict(dataset), dtype=np.float64)

        for estimator in self.ensemble_:
            out += self.rate * estimator.predict(dataset)

        return out

    def feature_importances(self) -> np.ndarray:
        """Mean of the boosters' feature importances, one per feature column."""
        self._check_trained()

        importances = np.zeros(self.feature_count_, dtype=np.float64)

        for tree in self.ensemble_:
            importances += tree.feature_importances()

        return importances / len(self.ensemble_)

    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()

        # Training diagnostics and the attached logger are not part of the model.
        for key in ("losses_", "scores_", "_logger"):
            state.pop(key, None)

        return state

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        self.losses_ = None
        self.scores_ = None
