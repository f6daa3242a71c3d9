"""CLI tool for summarizing the enriched ratings."""

import argparse
import sys

from rating_eda.analysis.aggregations import TIME_FIELDS, RatingAggregator
from rating_eda.analysis.plots import save_all_plots
from rating_eda.cli.common import add_pipeline_arguments, run_pipeline_from_args
from rating_eda.utils.logger import get_logger

logger = get_logger(__name__)


def main(argv=None):
    """Main function for the analyze CLI."""
    parser = argparse.ArgumentParser(
        description="Summarize product ratings by category, time and n-th rating",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print summaries for the ratings in data/
  rating-analyze --offset-seconds -25200
  
  # Also write charts
  rating-analyze --offset-seconds -25200 --plots-dir reports/plots
  
  # Show time breakdowns and the n-th rating curve up to 100
  rating-analyze --config configs/pipeline.yaml --detailed --max-nth 100
        """,
    )
    
    add_pipeline_arguments(parser)
    
    parser.add_argument(
        "--detailed",
        action="store_true",
        help="Show time and n-th rating breakdowns",
    )
    
    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of top items to show (default: 10)",
    )
    
    parser.add_argument(
        "--max-nth",
        type=int,
        default=50,
        help="Largest user/item rank in n-th rating summaries (default: 50)",
    )
    
    parser.add_argument(
        "--plots-dir",
        type=str,
        default=None,
        help="Directory to write PNG charts to (default: no charts)",
    )
    
    args = parser.parse_args(argv)
    
    try:
        ratings = run_pipeline_from_args(args)
        overview = RatingAggregator.overview(ratings)
        
        print("\n" + "=" * 70)
        print("RATING STATISTICS")
        print("=" * 70)
        print(f"Total Ratings:   {overview['num_ratings']:,}")
        print(f"Unique Users:    {overview['unique_users']:,}")
        print(f"Unique Items:    {overview['unique_items']:,}")
        print(f"Average Rating:  {overview['avg_rating']:.3f}")
        print(f"Density:         {overview['density']:.2e}")
        
        print("\nRating Distribution:")
        for rating, row in RatingAggregator.rating_distribution(ratings).iterrows():
            print(f"  {rating}: {int(row['num_ratings']):10,} ({row['share'] * 100:5.1f}%)")
        
        print("\nBy Category:")
        for category, row in RatingAggregator.summary_by_category(ratings).iterrows():
            print(
                f"  {category[:30]:30s} {int(row['num_ratings']):10,} ratings, "
                f"avg={row['avg_rating']:.2f}"
            )
        
        print(f"\nTop {args.top_n} Most Rated Items:")
        top_items = RatingAggregator.top_entities(ratings, kind="item", n=args.top_n)
        for i, (item_id, row) in enumerate(top_items.iterrows(), 1):
            print(f"  {i:2d}. {item_id} ({int(row['num_ratings']):,} ratings, avg={row['avg_rating']:.2f})")
        
        if args.detailed:
            print("\n" + "=" * 70)
            print("DETAILED ANALYSIS")
            print("=" * 70)
            
            for field in TIME_FIELDS:
                print(f"\nBy {field}:")
                for value, row in RatingAggregator.summary_by_time(ratings, field).iterrows():
                    print(f"  {str(value):10s} {int(row['num_ratings']):10,}  avg={row['avg_rating']:.3f}")
            
            for kind in ["user", "item"]:
                summary = RatingAggregator.summary_by_nth(ratings, kind=kind, max_nth=args.max_nth)
                print(f"\nAverage rating by {kind} n-th rating (first 10 of {len(summary)}):")
                for nth, row in summary.head(10).iterrows():
                    print(f"  {nth:4d}: avg={row['avg_rating']:.3f} (n={int(row['num_ratings']):,})")
        
        if args.plots_dir:
            save_all_plots(ratings, args.plots_dir, max_nth=args.max_nth)
        
        print("\n" + "=" * 70)
        print("Analysis completed successfully!")
        print("=" * 70)
        
        return 0
        
    except Exception as e:
        logger.error(f"Analysis failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
