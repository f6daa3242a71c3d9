"""Utility modules for the rating_eda package."""

from rating_eda.utils.logger import get_logger, set_log_level
from rating_eda.utils.config import PipelineConfig, load_config, save_config

__all__ = ["get_logger", "set_log_level", "PipelineConfig", "load_config", "save_config"]
