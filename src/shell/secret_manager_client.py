"""Secret Manager Client - Imperative Shell.

This module reads secrets (such as the Tomorrow.io API key) from
Google Cloud Secret Manager and resolves config placeholders.
All I/O is contained here.

Placeholder syntax:
    ${secret:name}   - latest version of a Secret Manager secret
    ${ENV_VAR}       - environment variable
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from google.cloud import secretmanager


logger = logging.getLogger(__name__)

SECRET_PREFIX = "secret:"


@dataclass
class SecretManagerConfig:
    """Configuration for Secret Manager client.

    Attributes:
        project_id: GCP project ID (None for default)
    """
    project_id: Optional[str] = None


class SecretManagerClient:
    """Client for reading secrets from Google Cloud Secret Manager.

    This is part of the imperative shell - it handles secret I/O.
    """

    def __init__(self, config: Optional[SecretManagerConfig] = None) -> None:
        """Initialize Secret Manager client.

        Args:
            config: Secret Manager configuration
        """
        self.config = config or SecretManagerConfig()
        self._client: Optional[secretmanager.SecretManagerServiceClient] = None

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy initialization of Secret Manager client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def get_secret(self, secret_name: str, version: str = "latest") -> Optional[str]:
        """Fetch a secret value from Secret Manager.

        This method performs I/O.

        Args:
            secret_name: Name of the secret (not the full resource path)
            version: Version of the secret (default: "latest")

        Returns:
            Secret value as string, or None if unavailable
        """
        if not self.config.project_id:
            logger.error("No project ID configured for Secret Manager")
            return None

        name = f"projects/{self.config.project_id}/secrets/{secret_name}/versions/{version}"

        try:
            logger.info("Fetching secret: %s", secret_name)
            response = self.client.access_secret_version(request={"name": name})
            return response.payload.data.decode("UTF-8")

        except Exception as e:
            logger.error("Failed to fetch secret %s: %s", secret_name, str(e))
            return None

    def get_secret_or_env(self, secret_name: str, env_var_name: str) -> Optional[str]:
        """Try Secret Manager first, then fall back to an environment variable.

        Args:
            secret_name: Name of the secret in Secret Manager
            env_var_name: Environment variable to use as fallback

        Returns:
            Secret value, env var value, or None
        """
        secret_value = self.get_secret(secret_name)
        if secret_value:
            return secret_value

        env_value = os.environ.get(env_var_name)
        if env_value:
            logger.info("Using environment variable %s (Secret Manager unavailable)", env_var_name)
            return env_value

        return None

    def resolve(self, value: str) -> str:
        """Resolve a ``${...}`` placeholder.

        Values that are not placeholders, and placeholders that cannot be
        resolved, are returned unchanged.

        Args:
            value: Config value, possibly a placeholder

        Returns:
            Resolved value
        """
        if not (value.startswith("${") and value.endswith("}")):
            return value

        placeholder = value[2:-1]

        if placeholder.startswith(SECRET_PREFIX):
            secret = self.get_secret(placeholder[len(SECRET_PREFIX):])
            return secret if secret is not None else value

        env_value = os.environ.get(placeholder)
        if env_value:
            return env_value

        logger.warning("Environment variable %s not set", placeholder)
        return value
