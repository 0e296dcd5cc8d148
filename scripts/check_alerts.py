#!/usr/bin/env python3
"""Check active weather alerts for a location.

Runs the same pipeline as the Cloud Function and prints a summary.
Every uncached run spends one request of the API quota.

Usage:
    # Single location
    python scripts/check_alerts.py --lat 37.77 --lon -122.42

    # Custom radius
    python scripts/check_alerts.py --lat 37.77 --lon -122.42 --radius 100

    # All saved locations from the config file
    python scripts/check_alerts.py --saved

    # Repeat the call to see the cache serve it
    python scripts/check_alerts.py --lat 37.77 --lon -122.42 --repeat 3

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
    TOMORROW_API_KEY: API key, if not set in the config file
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.config import validate_config
from src.core.formatter import format_alert_list
from src.pipeline import AlertPipeline, FetchResult
from src.shell.config_loader import load_config

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def report(name: str, result: FetchResult, radius_km: float) -> bool:
    """Log a fetch result.

    Returns:
        True if the fetch succeeded
    """
    source = "cache" if result.from_cache else "API"
    logger.info("%s (%s):", name, source)

    if not result.success:
        logger.error("  %s", result.message)
        return False

    for line in format_alert_list(result.alerts, radius_km).splitlines():
        logger.info("  %s", line)
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Check weather alerts near a location")
    parser.add_argument("--lat", type=float, help="Latitude")
    parser.add_argument("--lon", type=float, help="Longitude")
    parser.add_argument("--radius", type=float, help="Search radius in km")
    parser.add_argument("--saved", action="store_true", help="Check all saved locations")
    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--repeat", type=int, default=1, help="Number of times to fetch")
    args = parser.parse_args()

    if not args.saved and (args.lat is None or args.lon is None):
        parser.error("--lat and --lon are required unless --saved is given")

    config = load_config(args.config)
    if not config.api_key:
        config.api_key = os.environ.get("TOMORROW_API_KEY", "")

    validation = validate_config(config)
    for error in validation.errors:
        log = logger.warning if error.severity == "warning" else logger.error
        log("Config %s: %s", error.field, error.message)
    if not validation.valid:
        return 1

    pipeline = AlertPipeline(config)

    targets = []
    if args.saved:
        targets = [
            (loc.name, loc.latitude, loc.longitude, loc.radius_km)
            for loc in config.saved_locations
        ]
        if not targets:
            logger.error("No saved locations in configuration")
            return 1
    else:
        radius = args.radius if args.radius is not None else config.default_radius_km
        targets = [(f"{args.lat},{args.lon}", args.lat, args.lon, radius)]

    failures = 0
    for _ in range(max(1, args.repeat)):
        for name, lat, lon, radius in targets:
            result = pipeline.fetch_alerts(lat, lon, radius)
            if not report(name, result, radius):
                failures += 1

    usage = pipeline.rate_limiter.usage()
    logger.info(
        "API usage: %d/%d this hour, %d/%d today",
        usage.hourly_count,
        usage.hourly_limit,
        usage.daily_count,
        usage.daily_limit,
    )

    return 0 if failures == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
