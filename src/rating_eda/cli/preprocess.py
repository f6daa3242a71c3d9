"""CLI tool for running the rating pipeline and saving its output."""

import argparse
import sys

from rating_eda.cli.common import add_pipeline_arguments, run_pipeline_from_args
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)


def main(argv=None):
    """Main function for the preprocess CLI."""
    parser = argparse.ArgumentParser(
        description="Deduplicate ratings and derive time and rank features",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Enrich every ratings_*.csv in data/ (UTC-7, summer time)
  rating-preprocess --data-path data --offset-seconds -25200 --output data/enriched.parquet
  
  # Take the offset from a config file
  rating-preprocess --config configs/pipeline.yaml --output data/enriched.csv
  
  # Keep the first row seen for duplicate user/item pairs
  rating-preprocess --offset-seconds 0 --dedup-tie-break input_order --output out.parquet
        """,
    )
    
    add_pipeline_arguments(parser)
    
    parser.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output file path (.csv, .parquet or .json)",
    )
    
    args = parser.parse_args(argv)
    
    try:
        logger.info("Starting preprocessing...")
        
        ratings = run_pipeline_from_args(args)
        ratings.save(args.output)
        
        logger.info(f"Preprocessed {len(ratings):,} records")
        logger.info(f"Columns: {', '.join(ratings.columns)}")
        logger.info("Preprocessing completed successfully!")
        return 0
        
    except Exception as e:
        logger.error(f"Preprocessing failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
