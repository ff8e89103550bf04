# ABOUTME: Runtime settings for a credential exchange run
# ABOUTME: Loads the tenant host, app key and user from the environment with CLI overrides

"""Configuration management for centrify-aws."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from .exceptions import ConfigError

# Environment variables consulted by Settings.from_env
ENV_VARS = {
    "host": "CENTRIFY_HOST",
    "app_key": "CENTRIFY_APP_KEY",
    "user": "CENTRIFY_USER",
    "role_arn": "CENTRIFY_ROLE_ARN",
    "duration_seconds": "CENTRIFY_DURATION",
    "max_rounds": "CENTRIFY_MAX_ROUNDS",
    "oob_timeout": "CENTRIFY_OOB_TIMEOUT",
}

DEFAULT_REGION = "us-east-1"
DEFAULT_MAX_ROUNDS = 10
DEFAULT_POLL_INTERVAL = 2.0

# AssumeRoleWithSAML limits
MIN_DURATION_SECONDS = 900
MAX_DURATION_SECONDS = 43200


@dataclass
class Settings:
    """Settings for one authentication run."""

    host: str | None = None  # Centrify tenant, e.g. "acme.my.centrify.net"
    app_key: str | None = None  # Key of the AWS SAML application in the user portal
    user: str | None = None  # Login name, e.g. "jane@acme.com"
    aws_region: str = DEFAULT_REGION
    role_arn: str | None = None  # Pick this role without prompting when present in the assertion
    duration_seconds: int | None = None  # Overrides the assertion's SessionDuration
    max_rounds: int = DEFAULT_MAX_ROUNDS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    oob_timeout: float | None = None  # Local out-of-band deadline, off by default

    @property
    def base_url(self) -> str:
        """Tenant URL normalized to https://<hostname>."""
        return normalize_host(self.host or "")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Create settings from a dictionary, coercing numeric strings."""
        data = {k: v for k, v in data.items() if v is not None and v != ""}

        for key in ("duration_seconds", "max_rounds"):
            if key in data:
                data[key] = _to_int(key, data[key])
        for key in ("poll_interval", "oob_timeout"):
            if key in data:
                data[key] = _to_float(key, data[key])

        return cls(**data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> "Settings":
        """Build settings from environment variables; non-empty overrides win.

        Args:
            environ: Environment mapping, defaults to ``os.environ``.
            **overrides: Values supplied on the command line.

        Returns:
            Settings object (not yet validated).
        """
        environ = os.environ if environ is None else environ

        data: dict[str, Any] = {key: environ.get(var) for key, var in ENV_VARS.items()}
        data["aws_region"] = environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION")

        for key, value in overrides.items():
            if value is not None and value != "":
                data[key] = value

        return cls.from_dict(data)

    def validate(self) -> "Settings":
        """Raise ConfigError unless the required inputs are present and sane."""
        required = ["host", "app_key", "user"]
        missing = [ENV_VARS[k] for k in required if not getattr(self, k)]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        # Raises ConfigError for unusable hosts
        normalize_host(self.host)

        if self.max_rounds < 1:
            raise ConfigError(f"max_rounds must be at least 1, got {self.max_rounds}")
        if self.poll_interval < 0:
            raise ConfigError(f"poll_interval must not be negative, got {self.poll_interval}")
        if self.oob_timeout is not None and self.oob_timeout <= 0:
            raise ConfigError(f"oob_timeout must be positive, got {self.oob_timeout}")
        if self.duration_seconds is not None and not (
            MIN_DURATION_SECONDS <= self.duration_seconds <= MAX_DURATION_SECONDS
        ):
            raise ConfigError(
                f"duration_seconds must be between {MIN_DURATION_SECONDS} and {MAX_DURATION_SECONDS}, "
                f"got {self.duration_seconds}"
            )
        return self


def normalize_host(host: str) -> str:
    """Return ``https://<hostname>[:port]`` for a bare domain or URL.

    Raises:
        ConfigError: If no hostname can be parsed.
    """
    host = (host or "").strip()
    url_to_parse = host if host.startswith(("http://", "https://")) else f"https://{host}"

    try:
        parsed = urlparse(url_to_parse)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise ConfigError(f"Invalid identity provider host '{host}': {e}") from e

    if not hostname:
        raise ConfigError(f"Invalid identity provider host '{host}'")

    return f"https://{hostname}:{port}" if port else f"https://{hostname}"


def clamp_duration(seconds: int | None) -> int | None:
    """Bring an IdP-supplied session duration into the range STS accepts."""
    if seconds is None:
        return None
    return max(MIN_DURATION_SECONDS, min(seconds, MAX_DURATION_SECONDS))


def _to_int(key: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e


def _to_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}") from e
