"""Aggregations and charts over enriched ratings."""

from rating_eda.analysis.aggregations import RatingAggregator
from rating_eda.analysis.plots import save_all_plots

__all__ = ["RatingAggregator", "save_all_plots"]
