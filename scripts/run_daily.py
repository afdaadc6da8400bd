#!/usr/bin/env python3
"""Daily surf rating ingestion job.

Fetches a forecast reading for each region and stores which locations
are good for the day.

Usage:
    # Rate every region in the catalog for today
    python scripts/run_daily.py

    # Rate one region for a specific day
    python scripts/run_daily.py --region "Western Cape" --date 2024-06-15

    # Score and list without writing anything
    python scripts/run_daily.py --dry-run

    # Use a specific database file
    python scripts/run_daily.py --db /tmp/ratings.db
"""

import argparse
import logging
import sys
from datetime import date, datetime, time, timezone
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from surfcheck.clients.open_meteo_client import OpenMeteoClient, OpenMeteoError
from surfcheck.core.aggregator import RatingAggregator
from surfcheck.core.location import LocationCatalog
from surfcheck.core.scorer import describe
from surfcheck.storage.rating_store import RatingStore


logger = logging.getLogger("surfcheck.run_daily")


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Quiet down noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Store daily good-location ratings per region",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--region",
        type=str,
        nargs="+",
        help="Region(s) to rate (default: every region in the catalog)",
    )

    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to rate, YYYY-MM-DD (default: today, UTC)",
    )

    parser.add_argument(
        "--catalog",
        type=Path,
        help="Path to locations.yaml (default: config/locations.yaml)",
    )

    parser.add_argument(
        "--db",
        type=Path,
        help="Path to ratings database (default: $SURFCHECK_DB_PATH or ~/.cache/surfcheck/ratings.db)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Score locations and print them without storing ratings",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def rate_region(aggregator, client, region_name, rating_date, dry_run=False) -> dict:
    """Fetch conditions for one region and store (or list) its good locations."""
    region = aggregator.catalog.get_region(region_name)
    if region is None or region.coordinates is None:
        logger.warning(f"No coordinates configured for region: {region_name}")
        return {"region": region_name, "stored": 0, "good": 0, "error": "no coordinates"}

    # Rate the forecast hour nearest midday UTC
    when = datetime.combine(rating_date, time(12, 0), tzinfo=timezone.utc)

    try:
        reading = client.get_reading(
            region.coordinates.lat,
            region.coordinates.lon,
            when=when,
            region=region_name,
        )
    except OpenMeteoError as e:
        logger.error(f"Forecast fetch failed for {region_name}: {e}")
        return {"region": region_name, "stored": 0, "good": 0, "error": str(e)}

    ranked = aggregator.rank_region(reading, region_name)
    for scored in ranked:
        label = describe(scored.score)
        print(
            f"  {region_name:<16} {scored.location.name:<24} "
            f"{label.stars:<5} {scored.score}/5 {label.description}",
            file=sys.stderr,
        )

    good = sum(1 for s in ranked if s.is_suitable)
    stored = 0
    if not dry_run:
        stored = aggregator.store_good_ratings(reading, region_name, rating_date)

    return {"region": region_name, "stored": stored, "good": good, "error": None}


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    rating_date = args.date or datetime.now(timezone.utc).date()

    catalog = LocationCatalog.from_yaml(args.catalog)
    aggregator = RatingAggregator(catalog, RatingStore(args.db))
    client = OpenMeteoClient()

    regions = args.region or catalog.regions

    print(f"Rating {len(regions)} region(s) for {rating_date.isoformat()}", file=sys.stderr)

    results = [
        rate_region(aggregator, client, region, rating_date, args.dry_run)
        for region in regions
    ]

    # Summary (always to stderr so it doesn't pollute piped output)
    print(file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    print("SUMMARY", file=sys.stderr)
    print("=" * 50, file=sys.stderr)
    for result in results:
        line = f"  {result['region']}: {result['good']} good, {result['stored']} stored"
        if result["error"]:
            line += f" (error: {result['error']})"
        print(line, file=sys.stderr)
    print("=" * 50, file=sys.stderr)

    return 1 if all(r["error"] for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
