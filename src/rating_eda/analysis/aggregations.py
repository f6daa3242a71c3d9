"""Aggregate views over enriched ratings."""

from typing import Dict

import pandas as pd

from rating_eda.data.pipeline import NTH_COLUMNS, EnrichedRatings
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
TIME_FIELDS = ["hour", "day_of_week", "month", "year"]
ENTITY_KEYS = {"user": "user_id", "item": "item_id"}


def _rating_summary(grouped) -> pd.DataFrame:
    summary = grouped["rating"].agg(["count", "mean"])
    summary.columns = ["num_ratings", "avg_rating"]
    return summary


class RatingAggregator:
    """
    Group-by summaries of an enriched rating set.

    All methods only read from the ``EnrichedRatings`` handle, so one
    handle can feed any number of summaries.
    """

    @staticmethod
    def rating_distribution(ratings: EnrichedRatings) -> pd.DataFrame:
        """
        Count and share of each rating value.

        Args:
            ratings: Enriched ratings

        Returns:
            DataFrame indexed by rating with 'num_ratings' and 'share'
        """
        counts = ratings.select(["rating"])["rating"].value_counts().sort_index()
        dist = counts.rename("num_ratings").to_frame()
        dist.index.name = "rating"
        total = dist["num_ratings"].sum()
        dist["share"] = dist["num_ratings"] / total if total else 0.0
        return dist

    @staticmethod
    def summary_by_category(ratings: EnrichedRatings) -> pd.DataFrame:
        """
        Per-category volume, mean rating and audience size.

        Args:
            ratings: Enriched ratings

        Returns:
            DataFrame indexed by category, sorted by number of ratings
        """
        df = ratings.select(["category", "rating", "user_id", "item_id"])
        grouped = df.groupby("category")

        summary = _rating_summary(grouped)
        summary["unique_users"] = grouped["user_id"].nunique()
        summary["unique_items"] = grouped["item_id"].nunique()

        return summary.sort_values("num_ratings", ascending=False)

    @staticmethod
    def summary_by_time(ratings: EnrichedRatings, field: str) -> pd.DataFrame:
        """
        Rating volume and mean rating by a calendar field.

        Args:
            ratings: Enriched ratings
            field: One of "hour", "day_of_week", "month", "year"

        Returns:
            DataFrame indexed by the field value in calendar order

        Raises:
            ValueError: If field is not a calendar field
        """
        if field not in TIME_FIELDS:
            raise ValueError(f"field must be one of {TIME_FIELDS}, got {field!r}")

        df = ratings.select([field, "rating"])
        summary = _rating_summary(df.groupby(field))

        if field == "day_of_week":
            summary = summary.reindex([d for d in WEEKDAYS if d in summary.index])
        else:
            summary = summary.sort_index()

        return summary

    @staticmethod
    def summary_by_nth(
        ratings: EnrichedRatings,
        kind: str = "user",
        max_nth: int = 50,
    ) -> pd.DataFrame:
        """
        Mean rating of the n-th rating given by a user (or received by an item).

        Args:
            ratings: Enriched ratings
            kind: "user" or "item"
            max_nth: Largest rank to include

        Returns:
            DataFrame indexed by rank 1..max_nth (ranks present only)
        """
        if max_nth < 1:
            raise ValueError("max_nth must be at least 1")

        column = NTH_COLUMNS.get(kind)
        if column is None:
            raise ValueError(f"kind must be one of {sorted(NTH_COLUMNS)}, got {kind!r}")

        df = ratings.filter_nth(kind, max_nth)
        summary = _rating_summary(df.groupby(column)).sort_index()

        logger.info(f"Computed {kind} n-th rating summary for ranks up to {max_nth}")
        return summary

    @staticmethod
    def activity_distribution(ratings: EnrichedRatings, kind: str = "user") -> pd.Series:
        """
        How many users (items) gave (received) each number of ratings.

        Args:
            ratings: Enriched ratings
            kind: "user" or "item"

        Returns:
            Series indexed by ratings-per-entity, values are entity counts
        """
        key = ENTITY_KEYS.get(kind)
        if key is None:
            raise ValueError(f"kind must be one of {sorted(ENTITY_KEYS)}, got {kind!r}")

        per_entity = ratings.select([key])[key].value_counts()
        activity = per_entity.value_counts().sort_index()
        activity.index.name = f"ratings_per_{kind}"
        return activity.rename(f"num_{kind}s")

    @staticmethod
    def top_entities(ratings: EnrichedRatings, kind: str = "item", n: int = 10) -> pd.DataFrame:
        """
        Most rated users or items.

        Args:
            ratings: Enriched ratings
            kind: "user" or "item"
            n: Number of rows to return

        Returns:
            DataFrame indexed by id with 'num_ratings' and 'avg_rating'
        """
        key = ENTITY_KEYS.get(kind)
        if key is None:
            raise ValueError(f"kind must be one of {sorted(ENTITY_KEYS)}, got {kind!r}")

        df = ratings.select([key, "rating"])
        summary = _rating_summary(df.groupby(key))
        return summary.sort_values(["num_ratings", "avg_rating"], ascending=False).head(n)

    @staticmethod
    def overview(ratings: EnrichedRatings) -> Dict[str, float]:
        """Headline numbers for an enriched rating set."""
        df = ratings.select(["user_id", "item_id", "rating"])
        n_users = df["user_id"].nunique()
        n_items = df["item_id"].nunique()

        return {
            "num_ratings": len(df),
            "unique_users": n_users,
            "unique_items": n_items,
            "avg_rating": float(df["rating"].mean()) if len(df) else 0.0,
            "density": len(df) / (n_users * n_items) if n_users and n_items else 0.0,
        }
