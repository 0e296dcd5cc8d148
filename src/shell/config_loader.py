"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, SavedLocation) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Optional

import yaml

from src.core.config import (
    DEFAULT_BASE_URL,
    DEFAULT_INSIGHTS,
    DEFAULT_RADIUS_KM,
    Config,
    SavedLocation,
)
from src.core.cache import CACHE_DURATION_SECONDS
from src.core.rate_limit import RateLimitConfig
from src.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)

# Secret Manager secret holding the API key, used by load_config_from_env
DEFAULT_API_KEY_SECRET = "tomorrow-api-key"


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get or create a Secret Manager client.

    Returns None if no GCP project can be determined (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT")
    if not project_id:
        # Try to get from gcloud config
        try:
            result = subprocess.run(
                ["gcloud", "config", "get-value", "project"],
                capture_output=True,
                text=True,
                timeout=2,
            )
            if result.returncode == 0 and result.stdout.strip():
                project_id = result.stdout.strip()
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("gcloud project lookup failed: %s", e)

    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Resolve a value that may contain secret or env var placeholders.

    Args:
        value: Value to resolve (may contain ${...} placeholders)
        secret_client: Client for resolving secrets

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    # No secret client - only handle env vars
    if value.startswith("${") and value.endswith("}"):
        var_spec = value[2:-1]
        if not var_spec.startswith("secret:"):
            env_value = os.environ.get(var_spec)
            if env_value:
                return env_value
            logger.warning("Environment variable %s not set", var_spec)

    return value


def _parse_rate_limit(data: dict[str, Any]) -> RateLimitConfig:
    """Parse API quota settings from config data."""
    defaults = RateLimitConfig()
    return RateLimitConfig(
        requests_per_second=int(data.get("requests_per_second", defaults.requests_per_second)),
        requests_per_hour=int(data.get("requests_per_hour", defaults.requests_per_hour)),
        requests_per_day=int(data.get("requests_per_day", defaults.requests_per_day)),
    )


def _parse_location(data: dict[str, Any], default_radius_km: float) -> SavedLocation:
    """Parse a saved location from config data."""
    return SavedLocation(
        name=data["name"],
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        radius_km=float(data.get("radius_km", default_radius_km)),
    )


def _parse_insights(value: Any) -> tuple[str, ...]:
    """Parse insights given as a list or a comma-separated string."""
    if value is None:
        return DEFAULT_INSIGHTS
    if isinstance(value, str):
        return tuple(p.strip() for p in value.split(",") if p.strip())
    return tuple(str(v) for v in value)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only placeholder expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    secret_client = None
    api_key = data.get("api_key", "")
    if isinstance(api_key, str) and api_key.startswith("${secret:"):
        secret_client = _get_secret_manager_client()

    default_radius_km = float(data.get("default_radius_km", DEFAULT_RADIUS_KM))

    locations = [
        _parse_location(loc, default_radius_km)
        for loc in data.get("saved_locations", [])
    ]

    return Config(
        api_key=_resolve_value(api_key, secret_client) or "",
        base_url=data.get("base_url", DEFAULT_BASE_URL),
        insights=_parse_insights(data.get("insights")),
        default_radius_km=default_radius_km,
        cache_ttl_seconds=float(data.get("cache_ttl_seconds", CACHE_DURATION_SECONDS)),
        retry_delay_seconds=float(data.get("retry_delay_seconds", 1.0)),
        request_timeout_seconds=int(data.get("request_timeout_seconds", 30)),
        rate_limit=_parse_rate_limit(data.get("rate_limit") or {}),
        saved_locations=locations,
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: radius %.1fkm, %d saved locations",
        config.default_radius_km,
        len(config.saved_locations),
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        TOMORROW_API_KEY: API key (or use Secret Manager)
        TOMORROW_API_KEY_SECRET: Secret name in Secret Manager
        TOMORROW_BASE_URL: API base URL override
        ALERT_RADIUS_KM: Default search radius
        CACHE_TTL_SECONDS: Cache lifetime

    Returns:
        Config object from environment
    """
    api_key = None

    secret_client = _get_secret_manager_client()
    if secret_client:
        secret_name = os.environ.get("TOMORROW_API_KEY_SECRET", DEFAULT_API_KEY_SECRET)
        api_key = secret_client.get_secret_or_env(secret_name, "TOMORROW_API_KEY")
    else:
        api_key = os.environ.get("TOMORROW_API_KEY")

    if not api_key:
        logger.warning("TOMORROW_API_KEY not set and no secret found")

    return Config(
        api_key=api_key or "",
        base_url=os.environ.get("TOMORROW_BASE_URL", DEFAULT_BASE_URL),
        default_radius_km=float(os.environ.get("ALERT_RADIUS_KM", DEFAULT_RADIUS_KM)),
        cache_ttl_seconds=float(os.environ.get("CACHE_TTL_SECONDS", CACHE_DURATION_SECONDS)),
    )
