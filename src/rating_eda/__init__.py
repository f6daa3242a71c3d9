"""
Rating-EDA: exploratory analysis of large product rating logs.

This package loads raw rating events, deduplicates them, derives calendar
and per-user/per-item rank features, and summarizes the result as tables
and static charts.
"""

__version__ = "0.1.0"

from rating_eda.data.dataset_loader import RatingsDataset
from rating_eda.data.pipeline import EnrichedRatings, RatingPipeline
from rating_eda.utils.logger import get_logger

__all__ = [
    "RatingsDataset",
    "RatingPipeline",
    "EnrichedRatings",
    "get_logger",
    "__version__",
]
