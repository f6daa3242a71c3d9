"""Ratings dataset loader with schema validation."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from rating_eda.data.pipeline import RAW_COLUMNS
from rating_eda.exceptions import SchemaError
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)

# Column order of headerless per-category ratings dumps (ratings_<Category>.csv)
HEADERLESS_COLUMNS = ["item_id", "user_id", "rating", "timestamp"]
SUPPORTED_FORMATS = ["csv", "parquet", "json"]
CATEGORY_PREFIX = "ratings_"


def category_from_path(path: Union[str, Path]) -> str:
    """Derive a category label from a file name (``ratings_Books.csv`` -> ``Books``)."""
    stem = Path(path).stem
    if stem.startswith(CATEGORY_PREFIX):
        stem = stem[len(CATEGORY_PREFIX):]
    return stem


class RatingsDataset:
    """
    Product ratings loader.

    Reads one ratings file or every file of the chosen format in a
    directory, normalizes them to the raw rating schema and drops rows
    that cannot be used downstream.
    """

    def __init__(
        self,
        data_path: Union[str, Path],
        format: str = "csv",
        has_header: Optional[bool] = None,
    ):
        """
        Initialize the dataset loader.

        Args:
            data_path: Path to a ratings file or a directory of them
            format: Format of the files ("csv", "parquet", "json")
            has_header: Whether CSV files carry a header row. None sniffs
                the first line for the expected column names.

        Raises:
            ValueError: If format is not supported
        """
        self.data_path = Path(data_path)
        self.format = format.lower()
        self.has_header = has_header
        self.df: Optional[pd.DataFrame] = None

        if self.format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {self.format}. "
                f"Supported: {', '.join(SUPPORTED_FORMATS)}"
            )

        logger.info(f"Initialized RatingsDataset with path: {self.data_path}")

    def _resolve_files(self) -> List[Path]:
        if self.data_path.is_dir():
            files = sorted(self.data_path.glob(f"*.{self.format}"))
            if not files:
                raise FileNotFoundError(
                    f"No .{self.format} files found in {self.data_path}"
                )
            return files

        if not self.data_path.exists():
            raise FileNotFoundError(f"Dataset file not found: {self.data_path}")
        return [self.data_path]

    def _csv_has_header(self, file_path: Path) -> bool:
        if self.has_header is not None:
            return self.has_header
        with open(file_path, "r") as f:
            first_line = f.readline().strip().lower()
        return "user_id" in first_line and "item_id" in first_line

    def _read_file(self, file_path: Path) -> pd.DataFrame:
        if self.format == "csv":
            if self._csv_has_header(file_path):
                df = pd.read_csv(file_path, dtype={"user_id": str, "item_id": str})
            else:
                df = pd.read_csv(
                    file_path,
                    header=None,
                    names=HEADERLESS_COLUMNS,
                    dtype={"user_id": str, "item_id": str},
                )
        elif self.format == "parquet":
            df = pd.read_parquet(file_path)
        else:
            df = pd.read_json(file_path, lines=True, dtype={"user_id": str, "item_id": str})

        if "category" not in df.columns:
            df["category"] = category_from_path(file_path)

        return df

    @staticmethod
    def validate(df: pd.DataFrame) -> pd.DataFrame:
        """
        Coerce a frame to the raw rating schema, dropping malformed rows.

        Rows with a missing id, a non-numeric rating or timestamp, or a
        rating outside 1-5 are dropped and counted in a warning.

        Args:
            df: Frame with at least the raw rating columns

        Returns:
            Cleaned copy with columns in raw schema order

        Raises:
            SchemaError: If a required column is missing
        """
        missing = [c for c in RAW_COLUMNS if c not in df.columns]
        if missing:
            raise SchemaError(f"Ratings data is missing columns: {missing}")

        df_valid = df[RAW_COLUMNS].copy()
        initial_len = len(df_valid)

        df_valid["rating"] = pd.to_numeric(df_valid["rating"], errors="coerce")
        df_valid["timestamp"] = pd.to_numeric(df_valid["timestamp"], errors="coerce")
        df_valid = df_valid.dropna(subset=RAW_COLUMNS)

        # Fractional ratings are malformed, not rounded
        whole = df_valid["rating"] == df_valid["rating"].round()
        in_range = df_valid["rating"].between(1, 5)
        df_valid = df_valid[whole & in_range]

        for col in ["user_id", "item_id", "category"]:
            df_valid[col] = df_valid[col].astype(str).str.strip()
        df_valid["rating"] = df_valid["rating"].astype("int64")
        df_valid["timestamp"] = df_valid["timestamp"].astype("int64")

        dropped = initial_len - len(df_valid)
        if dropped:
            logger.warning(f"Dropped {dropped:,} malformed rating rows")

        return df_valid.reset_index(drop=True)

    def load(self) -> pd.DataFrame:
        """
        Load and validate the ratings.

        Returns:
            DataFrame with user_id, item_id, rating, timestamp, category

        Raises:
            FileNotFoundError: If no input file exists
            SchemaError: If a file lacks required columns
        """
        files = self._resolve_files()

        frames = []
        for file_path in files:
            logger.info(f"Loading ratings from {file_path}")
            frames.append(self._read_file(file_path))

        combined = pd.concat(frames, ignore_index=True) if len(frames) > 1 else frames[0]
        self.df = self.validate(combined)

        logger.info(f"Loaded {len(self.df):,} records from {len(files)} file(s)")
        return self.df

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get dataset statistics.

        Returns:
            Dictionary containing dataset statistics

        Raises:
            RuntimeError: If dataset hasn't been loaded yet
        """
        if self.df is None:
            raise RuntimeError("Dataset not loaded. Call load() first.")

        pair_counts = self.df.groupby(["user_id", "item_id"]).size()

        stats = {
            "total_records": len(self.df),
            "unique_users": self.df["user_id"].nunique(),
            "unique_items": self.df["item_id"].nunique(),
            "categories": sorted(self.df["category"].unique().tolist()),
            "duplicate_pairs": int((pair_counts > 1).sum()),
            "rating_distribution": self.df["rating"].value_counts().sort_index().to_dict(),
            "first_timestamp": int(self.df["timestamp"].min()) if len(self.df) else None,
            "last_timestamp": int(self.df["timestamp"].max()) if len(self.df) else None,
        }

        return stats

    def filter_by_category(self, categories: Union[str, List[str]]) -> pd.DataFrame:
        """
        Filter dataset by category.

        Args:
            categories: Single category or list of categories

        Returns:
            Filtered DataFrame

        Raises:
            RuntimeError: If dataset hasn't been loaded yet
        """
        if self.df is None:
            raise RuntimeError("Dataset not loaded. Call load() first.")

        if isinstance(categories, str):
            categories = [categories]

        df_filtered = self.df[self.df["category"].isin(categories)]
        logger.info(f"Filtered by {len(categories)} categories: {len(df_filtered):,} records")

        return df_filtered
