"""Command-line interface tools."""

from rating_eda.cli.preprocess import main as preprocess_cli
from rating_eda.cli.analyze import main as analyze_cli

__all__ = ["preprocess_cli", "analyze_cli"]
