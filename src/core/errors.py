"""Pipeline error taxonomy - Pure functions.

Failures are returned to callers as typed values rather than raised.
The core only classifies; presentation is up to the caller.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Categories of pipeline outcomes that carry a message."""
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIALS = "invalid_credentials"
    NO_DATA_FOR_LOCATION = "no_data_for_location"
    TRANSPORT_ERROR = "transport_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    # Informational: a successful fetch with nothing in range
    NO_ALERTS_IN_RANGE = "no_alerts_in_range"


class QuotaPeriod(Enum):
    """Which local quota was exhausted."""
    SECOND = "second"
    HOURLY = "hourly"
    DAILY = "daily"


@dataclass(frozen=True)
class PipelineError:
    """A classified pipeline failure or notice.

    Attributes:
        kind: Error category
        message: Detail (transport message or notice text)
        quota_period: Exhausted quota for QUOTA_EXCEEDED
        status_code: Upstream HTTP status, if any
    """
    kind: ErrorKind
    message: str = ""
    quota_period: QuotaPeriod | None = None
    status_code: int | None = None


def classify_http_status(status_code: int | None, message: str) -> PipelineError:
    """Classify an upstream failure by HTTP status.

    Pure function.

    Args:
        status_code: HTTP status code (None for connection-level failures)
        message: Underlying error message

    Returns:
        PipelineError for the failure
    """
    if status_code == 429:
        return PipelineError(ErrorKind.RATE_LIMITED, message, status_code=status_code)
    if status_code == 401:
        return PipelineError(ErrorKind.INVALID_CREDENTIALS, message, status_code=status_code)
    if status_code == 404:
        return PipelineError(ErrorKind.NO_DATA_FOR_LOCATION, message, status_code=status_code)
    return PipelineError(ErrorKind.TRANSPORT_ERROR, message, status_code=status_code)


def quota_exceeded(period: QuotaPeriod) -> PipelineError:
    """Build the error for an exhausted local quota.

    Pure function.
    """
    return PipelineError(
        ErrorKind.QUOTA_EXCEEDED,
        f"{period.value} quota exceeded",
        quota_period=period,
    )


def no_alerts_in_range(radius_km: float) -> PipelineError:
    """Build the informational notice for an empty result.

    Pure function.
    """
    return PipelineError(
        ErrorKind.NO_ALERTS_IN_RANGE,
        f"No active alerts within {radius_km}km of this location",
    )


def format_error_message(error: PipelineError) -> str:
    """Get the user-facing text for an error or notice.

    Pure function.
    """
    if error.kind == ErrorKind.RATE_LIMITED:
        return "Rate limit exceeded. Please try again later."
    if error.kind == ErrorKind.INVALID_CREDENTIALS:
        return "Invalid API key. Please check your configuration."
    if error.kind == ErrorKind.NO_DATA_FOR_LOCATION:
        return "No data available for this location"
    if error.kind == ErrorKind.QUOTA_EXCEEDED:
        if error.quota_period == QuotaPeriod.DAILY:
            return "Daily API limit reached. Please try again tomorrow."
        if error.quota_period == QuotaPeriod.HOURLY:
            return "Hourly API limit reached. Please try again later."
        return "Too many requests. Please try again in a moment."
    if error.kind == ErrorKind.NO_ALERTS_IN_RANGE:
        return error.message
    return f"Error fetching weather data: {error.message}"
