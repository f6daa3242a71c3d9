"""Rating dataset transformation pipeline.

Turns a raw rating log into an analysis-ready record set:

1. ``deduplicate`` keeps one rating per (user_id, item_id) pair
2. ``derive_time_features`` adds local calendar fields
3. ``rank_within_group`` numbers each rating within its user and its item

Deduplication must come first: the rank stages count rows, so duplicate
pairs left in place would inflate ``user_nth`` and ``item_nth``.
"""

import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from rating_eda.exceptions import PipelineError, SchemaError
from rating_eda.utils.config import PipelineConfig
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)

RAW_COLUMNS = ["user_id", "item_id", "rating", "timestamp", "category"]
TIME_COLUMNS = ["local_timestamp", "hour", "day_of_week", "month", "year"]
RANK_COLUMNS = ["user_nth", "item_nth"]
ENRICHED_COLUMNS = RAW_COLUMNS + TIME_COLUMNS + RANK_COLUMNS

DEDUP_KEY = ["user_id", "item_id"]
NTH_COLUMNS = {"user": "user_nth", "item": "item_nth"}


def _require_columns(df: pd.DataFrame, columns: Sequence[str], stage: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"{stage}: missing required columns {missing}")


def default_rank_column(group_key: str) -> str:
    """Name of the rank column for a grouping key (``user_id`` -> ``user_nth``)."""
    base = group_key[:-3] if group_key.endswith("_id") else group_key
    return f"{base}_nth"


@dataclass(frozen=True, eq=False)
class EnrichedRatings:
    """
    Read-only handle to the enriched record set produced by a pipeline run.
    
    The underlying frame is private and never handed out directly;
    accessors return copies, so any number of downstream aggregations can
    share one handle. Handles are built by ``RatingPipeline.run``.
    """
    
    _data: pd.DataFrame = field(repr=False)
    offset_seconds: int
    dedup_tie_break: str = "timestamp"
    
    def __len__(self) -> int:
        return len(self._data)
    
    @property
    def columns(self) -> List[str]:
        return list(self._data.columns)
    
    @property
    def frame(self) -> pd.DataFrame:
        """A copy of the full enriched frame."""
        return self._data.copy()
    
    def select(self, columns: Sequence[str]) -> pd.DataFrame:
        """
        Copy of a subset of columns.
        
        Args:
            columns: Column names to keep
        
        Returns:
            DataFrame with only the requested columns
        
        Raises:
            SchemaError: If a requested column is not present
        """
        _require_columns(self._data, columns, "select")
        return self._data[list(columns)].copy()
    
    def filter_nth(self, kind: str, max_nth: int) -> pd.DataFrame:
        """
        Rows whose user or item rank is at most ``max_nth``.
        
        Args:
            kind: "user" or "item"
            max_nth: Inclusive upper bound on the rank
        
        Returns:
            Filtered copy of the enriched frame
        """
        if kind not in NTH_COLUMNS:
            raise ValueError(f"kind must be one of {sorted(NTH_COLUMNS)}, got {kind!r}")
        column = NTH_COLUMNS[kind]
        return self._data[self._data[column] <= max_nth].copy()
    
    def save(self, path: Union[str, Path]) -> Path:
        """
        Export the enriched frame, format inferred from the file suffix.
        
        Args:
            path: Output path ending in .csv, .parquet or .json
        
        Returns:
            The path written
        
        Raises:
            ValueError: If the suffix is not supported
        """
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        
        if output_path.suffix == ".csv":
            self._data.to_csv(output_path, index=False)
        elif output_path.suffix == ".parquet":
            self._data.to_parquet(output_path, index=False)
        elif output_path.suffix == ".json":
            self._data.to_json(output_path, orient="records", lines=True, date_format="iso")
        else:
            raise ValueError(
                f"Unsupported output format: {output_path.suffix}. "
                "Use .csv, .parquet or .json"
            )
        
        logger.info(f"Saved {len(self._data):,} enriched ratings to {output_path}")
        return output_path


class RatingPipeline:
    """
    Deduplicate a raw rating log and derive time and rank features.
    
    Every stage takes a DataFrame and returns a new one; inputs are never
    modified in place.
    """
    
    def __init__(self, offset_seconds: int, dedup_tie_break: str = "timestamp"):
        """
        Initialize the pipeline.
        
        Args:
            offset_seconds: Timezone/DST shift applied before extracting
                calendar fields. Required: the right value depends on the data.
            dedup_tie_break: "timestamp" keeps the earliest rating of a
                duplicate pair, "input_order" keeps the first row seen
        
        Raises:
            TypeError: If offset_seconds is not an integer
            ValueError: If dedup_tie_break is not supported
        """
        config = PipelineConfig(offset_seconds=offset_seconds, dedup_tie_break=dedup_tie_break)
        self.offset_seconds = config.offset_seconds
        self.dedup_tie_break = config.dedup_tie_break
        
        logger.info(
            f"Initialized RatingPipeline (offset_seconds={self.offset_seconds}, "
            f"dedup_tie_break={self.dedup_tie_break})"
        )
    
    @classmethod
    def from_config(cls, config: PipelineConfig) -> "RatingPipeline":
        return cls(offset_seconds=config.offset_seconds, dedup_tie_break=config.dedup_tie_break)
    
    def deduplicate(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Keep exactly one rating per (user_id, item_id) pair.
        
        The survivor is chosen by ``dedup_tie_break``; with "timestamp" the
        earliest rating wins and equal timestamps fall back to input order.
        Surviving rows keep their original relative order and index labels.
        
        Args:
            df: Raw ratings
        
        Returns:
            Deduplicated copy of ``df``
        """
        required = DEDUP_KEY + (["timestamp"] if self.dedup_tie_break == "timestamp" else [])
        _require_columns(df, required, "deduplicate")
        
        logger.info("Removing duplicate (user_id, item_id) ratings...")
        if df.empty:
            return df.copy()
        
        if self.dedup_tie_break == "timestamp":
            order = np.argsort(df["timestamp"].to_numpy(), kind="stable")
        else:
            order = np.arange(len(df))
        
        is_dup = df.iloc[order].duplicated(subset=DEDUP_KEY, keep="first").to_numpy()
        kept = np.sort(order[~is_dup])
        deduped = df.iloc[kept].copy()
        
        dropped = len(df) - len(deduped)
        if dropped:
            logger.info(f"Dropped {dropped:,} duplicate (user_id, item_id) rows")
        logger.info(f"Deduplication completed: {len(deduped):,} ratings kept")
        return deduped
    
    def derive_time_features(
        self,
        df: pd.DataFrame,
        offset_seconds: Optional[int] = None,
    ) -> pd.DataFrame:
        """
        Add ``local_timestamp`` and the calendar fields extracted from it.
        
        ``local_timestamp`` is ``timestamp + offset_seconds`` read as UTC, so
        that a UTC reading gives the intended local calendar date.
        
        Args:
            df: Deduplicated ratings
            offset_seconds: Shift in seconds (defaults to the pipeline's)
        
        Returns:
            Copy of ``df`` with local_timestamp, hour, day_of_week, month, year
        """
        if offset_seconds is None:
            offset_seconds = self.offset_seconds
        if isinstance(offset_seconds, bool) or not isinstance(offset_seconds, numbers.Integral):
            raise TypeError(
                f"offset_seconds must be an integer, got {type(offset_seconds).__name__}"
            )
        _require_columns(df, ["timestamp"], "derive_time_features")
        if df["timestamp"].isna().any():
            raise PipelineError("derive_time_features: column 'timestamp' contains nulls")
        
        logger.info(f"Deriving time features (offset_seconds={offset_seconds})...")
        
        df_time = df.copy()
        shifted = df_time["timestamp"].astype("int64") + offset_seconds
        df_time["local_timestamp"] = pd.to_datetime(shifted, unit="s")
        
        local = df_time["local_timestamp"].dt
        df_time["hour"] = local.hour.astype("int64")
        df_time["day_of_week"] = local.day_name().astype(object)
        df_time["month"] = local.month.astype("int64")
        df_time["year"] = local.year.astype("int64")
        
        logger.info("Time features created: " + ", ".join(TIME_COLUMNS))
        return df_time
    
    def rank_within_group(
        self,
        df: pd.DataFrame,
        group_key: str,
        order_key: str = "timestamp",
        output_col: Optional[str] = None,
    ) -> pd.DataFrame:
        """
        Dense-rank rows by ``order_key`` within each ``group_key`` value.
        
        The smallest value in a group gets rank 1, equal values share a rank
        and the next larger value gets the previous rank + 1.
        
        Args:
            df: Deduplicated ratings
            group_key: Column to partition by (e.g. "user_id", "item_id")
            order_key: Column to order by, ascending
            output_col: Rank column name (default: "user_nth" for "user_id", etc.)
        
        Returns:
            Copy of ``df`` with the rank column added
        """
        if output_col is None:
            output_col = default_rank_column(group_key)
        
        logger.info(f"Ranking ratings by {order_key} within each {group_key}...")
        df_ranked = df.copy()
        df_ranked[output_col] = self._dense_rank(df, group_key, order_key)
        logger.info(f"Created rank column '{output_col}'")
        return df_ranked
    
    @staticmethod
    def _dense_rank(df: pd.DataFrame, group_key: str, order_key: str) -> pd.Series:
        _require_columns(df, [group_key, order_key], "rank_within_group")
        
        if df.empty:
            return pd.Series(index=df.index, dtype="int64")
        
        for column in (group_key, order_key):
            if df[column].isna().any():
                raise PipelineError(f"rank_within_group: column {column!r} contains nulls")
        
        ranks = df.groupby(group_key, sort=False)[order_key].rank(method="dense")
        return ranks.astype("int64")
    
    def run(self, df: pd.DataFrame) -> EnrichedRatings:
        """
        Run the full pipeline on a raw rating log.
        
        Args:
            df: Raw ratings with user_id, item_id, rating, timestamp, category
        
        Returns:
            EnrichedRatings handle over the deduplicated, enriched records
        
        Raises:
            SchemaError: If a raw column is missing
        """
        _require_columns(df, RAW_COLUMNS, "run")
        logger.info(f"Starting rating pipeline on {len(df):,} records...")
        
        deduped = self.deduplicate(df).reset_index(drop=True)
        
        # Both ranks read the same deduplicated rows and share nothing else.
        logger.info("Ranking ratings by timestamp within each user_id and item_id...")
        user_nth = self._dense_rank(deduped, "user_id", "timestamp")
        item_nth = self._dense_rank(deduped, "item_id", "timestamp")
        
        enriched = self.derive_time_features(deduped)
        enriched["user_nth"] = user_nth
        enriched["item_nth"] = item_nth
        
        logger.info(
            f"Rating pipeline completed: {len(enriched):,} records, "
            f"{enriched['user_id'].nunique():,} users, "
            f"{enriched['item_id'].nunique():,} items"
        )
        return EnrichedRatings(
            _data=enriched,
            offset_seconds=self.offset_seconds,
            dedup_tie_break=self.dedup_tie_break,
        )
