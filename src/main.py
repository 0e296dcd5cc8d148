"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration and invokes the pipeline.

The pipeline (and with it the rate limiter and alert cache) is created
once per process and shared by every request the instance serves.
"""

import logging
import os
import json
import threading
from dataclasses import asdict
from typing import Any

import functions_framework
from flask import Request

from src.core.config import validate_coordinates, validate_radius
from src.core.errors import ErrorKind
from src.core.formatter import alert_to_dict
from src.pipeline import AlertPipeline, FetchResult
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# HTTP status returned for each error kind
ERROR_STATUS = {
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.QUOTA_EXCEEDED: 429,
    ErrorKind.INVALID_CREDENTIALS: 502,
    ErrorKind.NO_DATA_FOR_LOCATION: 404,
    ErrorKind.TRANSPORT_ERROR: 502,
}

_pipeline: AlertPipeline | None = None
_pipeline_lock = threading.Lock()


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("TOMORROW_API_KEY") or os.environ.get("TOMORROW_API_KEY_SECRET"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def get_pipeline() -> AlertPipeline:
    """Get the process-wide pipeline, creating it on first use."""
    global _pipeline
    with _pipeline_lock:
        if _pipeline is None:
            _pipeline = AlertPipeline(_get_config())
        return _pipeline


def _parse_query(request: Request, default_radius_km: float) -> tuple[float, float, float]:
    """Parse and validate lat/lon/radius_km query parameters.

    Raises:
        ValueError: If a parameter is missing or invalid
    """
    args = request.args

    if "lat" not in args or "lon" not in args:
        raise ValueError("Query parameters 'lat' and 'lon' are required")

    latitude = float(args["lat"])
    longitude = float(args["lon"])
    radius_km = float(args.get("radius_km", default_radius_km))

    errors = validate_coordinates(latitude, longitude, "location")
    errors.extend(validate_radius(radius_km, "radius_km"))
    if errors:
        raise ValueError("; ".join(e.message for e in errors))

    return latitude, longitude, radius_km


def build_response(
    result: FetchResult,
    pipeline: AlertPipeline,
) -> tuple[dict[str, Any], int]:
    """Build the JSON body and HTTP status for a fetch result."""
    response: dict[str, Any] = {
        "status": "success" if result.success else "error",
        "alerts": [alert_to_dict(a) for a in result.alerts],
        "count": len(result.alerts),
        "from_cache": result.from_cache,
        "message": result.message,
        "rate_limit": asdict(pipeline.rate_limiter.usage()),
    }

    if result.error is not None:
        response["error"] = result.error.kind.value
        return response, ERROR_STATUS.get(result.error.kind, 500)

    return response, 200


@functions_framework.http
def weather_alerts(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function entry point.

    Query parameters:
        lat: Latitude of the location
        lon: Longitude of the location
        radius_km: Search radius (optional, config default)

    Args:
        request: Flask request object

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    try:
        pipeline = get_pipeline()

        try:
            latitude, longitude, radius_km = _parse_query(
                request,
                pipeline.config.default_radius_km,
            )
        except ValueError as e:
            logger.warning("Invalid request: %s", e)
            return {"status": "error", "message": str(e)}, 400

        logger.info("Fetching alerts for %s,%s within %.1fkm", latitude, longitude, radius_km)

        result = pipeline.fetch_alerts(latitude, longitude, radius_km)

        logger.info(
            "Completed: %d alerts%s%s",
            len(result.alerts),
            " (cached)" if result.from_cache else "",
            f", {result.message}" if result.message else "",
        )

        return build_response(result, pipeline)

    except Exception as e:
        logger.exception("Unexpected error in weather alerts handler")
        return {
            "status": "error",
            "message": str(e),
        }, 500


# For local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python -m src.main LAT LON [RADIUS_KM]")
        sys.exit(1)

    class MockRequest:
        def __init__(self, args: dict[str, str]) -> None:
            self.args = args

    query = {"lat": sys.argv[1], "lon": sys.argv[2]}
    if len(sys.argv) > 3:
        query["radius_km"] = sys.argv[3]

    body, status = weather_alerts(MockRequest(query))
    print(f"\nResponse ({status}):")
    print(json.dumps(body, indent=2))
