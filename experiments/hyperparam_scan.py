"""
Hyperparameter scan for the gradient boosting ensemble.

Grid search over rate, ratio and booster height, each configuration scored
with k-fold cross validation. Results are saved as CSV and a heatmap.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from itertools import product
from sklearn.datasets import make_friedman1

from boostml.cross_validation import KFold
from boostml.datasets import Labeled
from boostml.exceptions import BoostMLError
from boostml.learners import RegressionTree
from boostml.metrics import RMSE
from boostml.regressors import GradientBoost

OUTPUT_DIR = Path(__file__).parent


def prepare_data():
    print("Generating regression data...")
    X, y = make_friedman1(n_samples=600, n_features=8, noise=1.0, random_state=42)
    return X, y


def grid_search():
    print("\n" + "="*60)
    print("Hyperparameter Grid Search - Gradient Boost")
    print("="*60)

    X, y = prepare_data()

    param_grid = {
        'rate': [0.05, 0.1, 0.3],
        'ratio': [0.5, 0.8, 1.0],
        'max_height': [2, 3, 5],
    }

    validator = KFold(k=5, random_state=42)
    metric = RMSE()

    results = []
    total_combinations = np.prod([len(v) for v in param_grid.values()])

    print(f"\nTotal combinations: {total_combinations}")

    for combo_idx, (rate, ratio, height) in enumerate(product(
        param_grid['rate'],
        param_grid['ratio'],
        param_grid['max_height']
    ), start=1):
        print(f"\n[{combo_idx}/{total_combinations}] Testing: "
              f"rate={rate}, ratio={ratio}, max_height={height}")

        model = GradientBoost(
            booster=RegressionTree(max_height=height, random_state=42),
            rate=rate,
            ratio=ratio,
            estimators=300,
            hold_out=0.1,
            random_state=42
        )

        try:
            score = validator.test(model, Labeled(X, y), metric)
        except BoostMLError as e:
            print(f"  Error: {e}")
            continue

        results.append({
            'rate': rate,
            'ratio': ratio,
            'max_height': height,
            'cv_rmse': score,
        })

        print(f"  CV RMSE: {score:.6f}")

    df_results = pd.DataFrame(results).sort_values('cv_rmse')

    output_path = OUTPUT_DIR / 'gradient_boost_grid_search.csv'
    df_results.to_csv(output_path, index=False)
    print(f"\nSaved results to: {output_path}")

    print("\n" + "="*60)
    print("Top 10 Configurations (by CV RMSE)")
    print("="*60)
    print(df_results.head(10).to_string(index=False))

    return df_results


def plot_heatmap(df_results):
    """Best CV RMSE per (rate, max_height), minimised over ratio."""
    pivot = df_results.pivot_table(
        index='rate', columns='max_height', values='cv_rmse', aggfunc='min'
    )

    fig, ax = plt.subplots(figsize=(6, 4))
    im = ax.imshow(pivot.values, cmap='viridis_r', aspect='auto')
    ax.set_xticks(range(len(pivot.columns)))
    ax.set_xticklabels(pivot.columns)
    ax.set_yticks(range(len(pivot.index)))
    ax.set_yticklabels(pivot.index)
    ax.set_xlabel('max_height')
    ax.set_ylabel('rate')
    fig.colorbar(im, ax=ax, label='CV RMSE')
    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'gradient_boost_grid_search.png', dpi=150)
    print("Saved plot: gradient_boost_grid_search.png")


if __name__ == "__main__":
    plot_heatmap(grid_search())
