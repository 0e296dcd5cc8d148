"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Alert parsing and normalization
- Geo/distance calculations
- Deduplication logic
- Rate limit decisions
- Cache expiry
- Error classification and formatting

All functions here are deterministic and have no I/O.
"""

from src.core.alert import Alert, RawAlertEvent, Severity, parse_raw_events, to_alert
from src.core.geo import calculate_distance, is_geometry_in_range, is_point_in_range, is_polygon_in_range
from src.core.dedup import AlertKey, dedupe, filter_relevant, make_alert_id, make_alert_key
from src.core.rate_limit import RateLimitConfig, RateLimitStatus, check_rate_limit, record_request
from src.core.cache import CacheEntry, is_expired, make_location_key
from src.core.errors import ErrorKind, PipelineError, QuotaPeriod, classify_http_status
from src.core.formatter import alert_to_dict, format_alert_list, format_alert_summary

__all__ = [
    # Alert
    "Alert",
    "RawAlertEvent",
    "Severity",
    "parse_raw_events",
    "to_alert",
    # Geo
    "calculate_distance",
    "is_geometry_in_range",
    "is_point_in_range",
    "is_polygon_in_range",
    # Dedup
    "AlertKey",
    "dedupe",
    "filter_relevant",
    "make_alert_id",
    "make_alert_key",
    # Rate limit
    "RateLimitConfig",
    "RateLimitStatus",
    "check_rate_limit",
    "record_request",
    # Cache
    "CacheEntry",
    "is_expired",
    "make_location_key",
    # Errors
    "ErrorKind",
    "PipelineError",
    "QuotaPeriod",
    "classify_http_status",
    # Formatter
    "alert_to_dict",
    "format_alert_list",
    "format_alert_summary",
]
