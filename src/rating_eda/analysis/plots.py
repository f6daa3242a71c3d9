"""Static charts for the rating aggregates."""

from pathlib import Path
from typing import Dict, Union

import matplotlib

matplotlib.use("Agg")  # headless
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from rating_eda.analysis.aggregations import TIME_FIELDS, RatingAggregator
from rating_eda.data.pipeline import EnrichedRatings
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)


def _save(fig, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logger.info(f"Saved plot: {path}")
    return path


def plot_rating_distribution(dist: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Bar chart of ratings per score."""
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(dist.index.astype(str), dist["num_ratings"], edgecolor="black", alpha=0.8)
    ax.set_title("Rating distribution")
    ax.set_xlabel("rating")
    ax.set_ylabel("# ratings")
    return _save(fig, Path(path))


def plot_category_summary(summary: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Ratings per category with the category mean rating on a second axis."""
    fig, ax = plt.subplots(figsize=(max(6, 0.5 * len(summary)), 4))
    labels = summary.index.astype(str)
    ax.bar(labels, summary["num_ratings"], alpha=0.8)
    ax.set_ylabel("# ratings")
    ax.tick_params(axis="x", rotation=60)

    ax2 = ax.twinx()
    ax2.plot(labels, summary["avg_rating"], color="tab:red", marker="o")
    ax2.set_ylabel("avg rating")

    ax.set_title("Ratings by category")
    return _save(fig, Path(path))


def plot_time_summary(summary: pd.DataFrame, field: str, path: Union[str, Path]) -> Path:
    """Two-panel chart: volume and mean rating per calendar value."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 4))
    labels = summary.index.astype(str)

    axes[0].bar(labels, summary["num_ratings"], alpha=0.8)
    axes[0].set_title(f"Ratings by {field}")
    axes[0].set_ylabel("# ratings")

    axes[1].plot(labels, summary["avg_rating"], marker="o")
    axes[1].set_title(f"Average rating by {field}")
    axes[1].set_ylabel("avg rating")

    for ax in axes:
        ax.set_xlabel(field)
        if field == "day_of_week":
            ax.tick_params(axis="x", rotation=45)

    return _save(fig, Path(path))


def plot_nth_summary(summary: pd.DataFrame, kind: str, path: Union[str, Path]) -> Path:
    """Mean rating of the n-th rating, with the sample size underneath."""
    fig, axes = plt.subplots(2, 1, figsize=(8, 6), sharex=True)

    axes[0].plot(summary.index, summary["avg_rating"], marker=".")
    axes[0].set_ylabel("avg rating")
    axes[0].set_title(f"Average rating by {kind} n-th rating")

    axes[1].bar(summary.index, summary["num_ratings"], alpha=0.8)
    axes[1].set_yscale("log")
    axes[1].set_ylabel("# ratings")
    axes[1].set_xlabel(f"{kind}_nth")

    return _save(fig, Path(path))


def plot_activity_loglog(activity: pd.Series, kind: str, path: Union[str, Path]) -> Path:
    """Log-log scatter of entities per activity level."""
    fig, ax = plt.subplots(figsize=(6, 4))
    if len(activity):
        ax.scatter(np.asarray(activity.index), activity.values, s=8)
        ax.set_xscale("log")
        ax.set_yscale("log")
    ax.set_title(f"{kind.capitalize()} activity (log-log)")
    ax.set_xlabel(f"# ratings per {kind}")
    ax.set_ylabel(f"# {kind}s")
    ax.grid(True, which="both", ls=":", alpha=0.5)
    return _save(fig, Path(path))


def save_all_plots(
    ratings: EnrichedRatings,
    output_dir: Union[str, Path],
    max_nth: int = 50,
) -> Dict[str, Path]:
    """
    Render every standard chart for an enriched rating set.

    Args:
        ratings: Enriched ratings
        output_dir: Directory for the PNG files
        max_nth: Largest rank shown in the n-th rating charts

    Returns:
        Mapping of chart name to written file path
    """
    output_dir = Path(output_dir)
    paths = {}

    paths["rating_distribution"] = plot_rating_distribution(
        RatingAggregator.rating_distribution(ratings),
        output_dir / "rating_distribution.png",
    )
    paths["category_summary"] = plot_category_summary(
        RatingAggregator.summary_by_category(ratings),
        output_dir / "category_summary.png",
    )

    for field in TIME_FIELDS:
        paths[f"by_{field}"] = plot_time_summary(
            RatingAggregator.summary_by_time(ratings, field),
            field,
            output_dir / f"by_{field}.png",
        )

    for kind in ["user", "item"]:
        paths[f"{kind}_nth"] = plot_nth_summary(
            RatingAggregator.summary_by_nth(ratings, kind=kind, max_nth=max_nth),
            kind,
            output_dir / f"{kind}_nth.png",
        )
        paths[f"{kind}_activity"] = plot_activity_loglog(
            RatingAggregator.activity_distribution(ratings, kind=kind),
            kind,
            output_dir / f"{kind}_activity_loglog.png",
        )

    logger.info(f"Saved {len(paths)} plots to {output_dir}")
    return paths
