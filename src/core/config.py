"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

import math
from dataclasses import dataclass, field

from src.core.cache import CACHE_DURATION_SECONDS
from src.core.rate_limit import RateLimitConfig


# Tomorrow.io v4 API base URL
DEFAULT_BASE_URL = "https://api.tomorrow.io/v4"

# Event categories requested from the events endpoint
DEFAULT_INSIGHTS = (
    "fires",
    "wind",
    "winter",
    "thunderstorms",
    "floods",
    "temperature",
    "tropical",
    "marine",
    "fog",
    "tornado",
)

DEFAULT_RADIUS_KM = 50.0


@dataclass(frozen=True)
class SavedLocation:
    """A named location to check for alerts.

    Attributes:
        name: Human-readable name (e.g., "Home", "Office")
        latitude: Location latitude
        longitude: Location longitude
        radius_km: Only alerts within this radius are reported
    """
    name: str
    latitude: float
    longitude: float
    radius_km: float = DEFAULT_RADIUS_KM


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        api_key: Tomorrow.io API key
        base_url: Tomorrow.io API base URL
        insights: Event categories to request
        default_radius_km: Radius used when a caller does not give one
        cache_ttl_seconds: How long fetched alerts are served from cache
        retry_delay_seconds: Wait before retrying after a per-second limit
        request_timeout_seconds: HTTP timeout for the alerts API
        rate_limit: API quota configuration
        saved_locations: Named locations for batch checks
    """
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    insights: tuple[str, ...] = DEFAULT_INSIGHTS
    default_radius_km: float = DEFAULT_RADIUS_KM
    cache_ttl_seconds: float = CACHE_DURATION_SECONDS
    retry_delay_seconds: float = 1.0
    request_timeout_seconds: int = 30
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    saved_locations: list[SavedLocation] = field(default_factory=list)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_radius(radius_km: float, field_name: str) -> list[ValidationError]:
    """Validate a search radius.

    Pure function.
    """
    if not math.isfinite(radius_km) or radius_km <= 0:
        return [ValidationError(
            field=field_name,
            message=f"Radius must be a positive number, got {radius_km}",
        )]
    return []


def validate_rate_limit(config: RateLimitConfig) -> list[ValidationError]:
    """Validate quota settings.

    Pure function.
    """
    errors = []

    for name in ("requests_per_second", "requests_per_hour", "requests_per_day"):
        value = getattr(config, name)
        if value <= 0:
            errors.append(ValidationError(
                field=f"rate_limit.{name}",
                message=f"Must be positive, got {value}",
            ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.api_key or config.api_key.startswith("${"):
        errors.append(ValidationError(
            field="api_key",
            message="API key not resolved (missing or still contains placeholder)",
            severity="warning",
        ))

    errors.extend(validate_radius(config.default_radius_km, "default_radius_km"))

    if config.cache_ttl_seconds < 0:
        errors.append(ValidationError(
            field="cache_ttl_seconds",
            message=f"Cache TTL cannot be negative, got {config.cache_ttl_seconds}",
        ))

    if config.retry_delay_seconds < 0:
        errors.append(ValidationError(
            field="retry_delay_seconds",
            message=f"Retry delay cannot be negative, got {config.retry_delay_seconds}",
        ))

    errors.extend(validate_rate_limit(config.rate_limit))

    for i, location in enumerate(config.saved_locations):
        errors.extend(validate_coordinates(
            location.latitude, location.longitude,
            f"saved_locations[{i}]",
        ))
        errors.extend(validate_radius(
            location.radius_km,
            f"saved_locations[{i}].radius_km",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
