"""Arguments and setup shared by the CLI tools."""

import argparse

from rating_eda.data.dataset_loader import RatingsDataset
from rating_eda.data.pipeline import EnrichedRatings, RatingPipeline
from rating_eda.utils.config import TIE_BREAKS, PipelineConfig, load_config
from rating_eda.utils.logger import get_logger, set_log_level

logger = get_logger(__name__)


def add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    """Add input, pipeline and logging options to a parser."""
    parser.add_argument(
        "--data-path",
        type=str,
        default="data",
        help="Path to a ratings file or a directory of them (default: data)",
    )
    
    parser.add_argument(
        "--format",
        type=str,
        default="csv",
        choices=["csv", "parquet", "json"],
        help="Input format (default: csv)",
    )
    
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML or JSON config file with a 'pipeline' section",
    )
    
    parser.add_argument(
        "--offset-seconds",
        type=int,
        default=None,
        help="Timezone/DST shift in seconds applied before calendar features "
             "(required unless set in --config)",
    )
    
    parser.add_argument(
        "--dedup-tie-break",
        type=str,
        default=None,
        choices=list(TIE_BREAKS),
        help="Which duplicate (user_id, item_id) row to keep (default: timestamp)",
    )
    
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )


def run_pipeline_from_args(args: argparse.Namespace) -> EnrichedRatings:
    """Load the ratings named by ``args`` and run the pipeline on them."""
    set_log_level(args.log_level)
    
    config = load_config(args.config) if args.config else {}
    pipeline_config = PipelineConfig.from_dict(
        config,
        offset_seconds=args.offset_seconds,
        dedup_tie_break=args.dedup_tie_break,
    )
    
    logger.info("Loading dataset...")
    dataset = RatingsDataset(data_path=args.data_path, format=args.format)
    df = dataset.load()
    
    pipeline = RatingPipeline.from_config(pipeline_config)
    return pipeline.run(df)
