"""
Regression experiment on the Friedman #1 problem.

Trains the gradient boosting ensemble with hold-out early stopping and
compares it against a single regression tree and the mean baseline.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from sklearn.datasets import make_friedman1
from sklearn.model_selection import train_test_split

from boostml.datasets import Labeled, Unlabeled
from boostml.learners import DummyRegressor, RegressionTree
from boostml.loggers import screen_logger
from boostml.metrics import RMSE
from boostml.regressors import GradientBoost

# Set style
plt.style.use('seaborn-v0_8-darkgrid')

OUTPUT_DIR = Path(__file__).parent


def load_and_prepare_data():
    """Generate Friedman #1 data and split 80/20."""
    print("Generating Friedman #1 dataset...")
    X, y = make_friedman1(n_samples=2000, n_features=10, noise=1.0, random_state=42)

    X_train, X_test, y_train, y_test = train_test_split(
        X, y, test_size=0.2, random_state=42
    )

    print(f"Train: {X_train.shape}, Test: {X_test.shape}")

    return X_train, X_test, y_train, y_test


def baseline_comparison(X_train, X_test, y_train, y_test):
    """Baselines: mean predictor and a single regression tree."""
    print("\n" + "="*60)
    print("Baselines")
    print("="*60)

    metric = RMSE()
    results = []

    for name, learner in [("Mean", DummyRegressor()), ("Tree (height 3)", RegressionTree(3, random_state=42))]:
        learner.train(Labeled(X_train, y_train))
        test_rmse = metric.score(learner.predict(Unlabeled(X_test)), y_test)
        print(f"{name:<16} test RMSE: {test_rmse:.6f}")
        results.append({'model': name, 'test_rmse': test_rmse})

    return results


def experiment_learning_rate(X_train, X_test, y_train, y_test):
    """Experiment: effect of learning rate (shrinkage) on the stopping epoch."""
    print("\n" + "="*60)
    print("Experiment: Effect of rate")
    print("="*60)

    rates = [0.05, 0.1, 0.3]
    results = []

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    for rate in rates:
        print(f"\nTraining with rate={rate}...")

        model = GradientBoost(
            booster=RegressionTree(max_height=3, random_state=42),
            rate=rate,
            ratio=0.8,
            estimators=500,
            hold_out=0.2,
            random_state=42
        )
        model.train(Labeled(X_train, y_train))

        test_rmse = RMSE().score(model.predict(Unlabeled(X_test)), y_test)
        print(f"Epochs: {len(model.losses_)}, kept: {len(model.ensemble_)}, test RMSE: {test_rmse:.6f}")

        results.append({
            'model': f'Gradient Boost (rate={rate})',
            'test_rmse': test_rmse,
            'epochs': len(model.losses_),
            'ensemble_size': len(model.ensemble_),
        })

        steps = pd.DataFrame(model.steps())
        axes[0].plot(steps['epoch'], steps['loss'], label=f'rate={rate}', linewidth=2)
        axes[1].plot(steps['epoch'], steps['score'], label=f'rate={rate}', linewidth=2)

    axes[0].set_xlabel('Epoch')
    axes[0].set_ylabel('L2 loss (train)')
    axes[0].set_yscale('log')
    axes[1].set_xlabel('Epoch')
    axes[1].set_ylabel('RMSE (validation)')
    for ax in axes:
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'regression_learning_rate.png', dpi=150)
    print("\nSaved plot: regression_learning_rate.png")

    return results


def experiment_feature_importances(X_train, y_train):
    """Only the first five Friedman features carry signal."""
    print("\n" + "="*60)
    print("Experiment: Feature importances")
    print("="*60)

    model = GradientBoost(rate=0.1, estimators=300, random_state=42)
    model.set_logger(screen_logger("boostml.experiments"))
    model.train(Labeled(X_train, y_train))

    importances = pd.Series(model.feature_importances(), name='importance')
    print(importances.to_string())

    fig, ax = plt.subplots(figsize=(8, 4))
    importances.plot.bar(ax=ax)
    ax.set_xlabel('Feature')
    ax.set_ylabel('Mean impurity decrease')
    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'regression_importances.png', dpi=150)
    print("Saved plot: regression_importances.png")


def main():
    X_train, X_test, y_train, y_test = load_and_prepare_data()

    results = baseline_comparison(X_train, X_test, y_train, y_test)
    results += experiment_learning_rate(X_train, X_test, y_train, y_test)
    experiment_feature_importances(X_train, y_train)

    df = pd.DataFrame(results)
    print("\n" + "="*60)
    print("Summary")
    print("="*60)
    print(df.to_string(index=False))
    df.to_csv(OUTPUT_DIR / 'regression_results.csv', index=False)


if __name__ == "__main__":
    np.random.seed(42)
    main()
