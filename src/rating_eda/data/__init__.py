"""Data loading and transformation modules."""

from rating_eda.data.dataset_loader import RatingsDataset
from rating_eda.data.pipeline import EnrichedRatings, RatingPipeline

__all__ = ["RatingsDataset", "RatingPipeline", "EnrichedRatings"]
