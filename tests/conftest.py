"""Pytest configuration and fixtures."""

import pytest
import pandas as pd

from rating_eda.data.pipeline import RatingPipeline

# 2001-09-09 01:46:40 UTC is a Sunday
SUNDAY = 1000000000
DAY = 86400


@pytest.fixture
def raw_ratings():
    """Create a small raw rating log with one duplicate (user_id, item_id) pair."""
    data = {
        "user_id": ["u1", "u1", "u1", "u1", "u2", "u2", "u3"],
        "item_id": ["i1", "i1", "i2", "i3", "i1", "i2", "i3"],
        "rating": [5, 3, 4, 2, 4, 5, 1],
        "timestamp": [
            SUNDAY + 100,
            SUNDAY,
            SUNDAY,
            SUNDAY + DAY,
            SUNDAY,
            SUNDAY + DAY,
            SUNDAY + 2 * DAY,
        ],
        "category": ["Books", "Books", "Books", "Books", "Music", "Music", "Books"],
    }
    return pd.DataFrame(data)


@pytest.fixture
def pipeline():
    """Pipeline with no timezone shift."""
    return RatingPipeline(offset_seconds=0)


@pytest.fixture
def enriched(pipeline, raw_ratings):
    """Enriched ratings for the raw_ratings fixture."""
    return pipeline.run(raw_ratings)


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
def sample_config():
    """Create a sample configuration."""
    return {
        "pipeline": {
            "offset_seconds": 28800,
            "dedup_tie_break": "input_order",
        },
    }
