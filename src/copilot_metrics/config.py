"""Configuration parsing, validation and credential storage for the metrics proxy."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import AuthenticationError, ConfigurationError, ValidationError
from .models import ConfigStatus, Credential

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 5.0
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Validated process settings used by the server and CLI."""

    host: str = "0.0.0.0"
    port: int = 3000
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for 'PORT': {raw!r} is not an integer.") from exc

    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid value for 'PORT': {port} is out of range.")
    return port


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for 'GITHUB_API_TIMEOUT': {raw!r} is not a number."
        ) from exc

    if timeout <= 0:
        raise ConfigurationError("Invalid value for 'GITHUB_API_TIMEOUT': expected a number greater than 0.")
    return timeout


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build and validate process settings from environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ`` (used by tests).

    Returns:
        A validated ``Settings`` instance.

    Raises:
        ConfigurationError: If ``PORT`` or ``GITHUB_API_TIMEOUT`` is invalid.
    """
    env = os.environ if environ is None else environ

    log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _VALID_LOG_LEVELS:
        logger.warning("Invalid log level %r, defaulting to INFO", log_level)
        log_level = "INFO"

    return Settings(
        host=env.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_parse_port(env.get("PORT", "3000").strip()),
        api_base_url=env.get("GITHUB_API_BASE_URL", DEFAULT_API_BASE_URL).strip().rstrip("/")
        or DEFAULT_API_BASE_URL,
        timeout_seconds=_parse_timeout(env.get("GITHUB_API_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS)).strip()),
        log_level=log_level,
    )


def load_credential_from_env(
    org: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Credential:
    """Read the GitHub credential for command-line use.

    Args:
        org: Organization name overriding ``GITHUB_ORG``.
        environ: Mapping to read instead of ``os.environ``.

    Raises:
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
        ConfigurationError: If no organization is given or configured.
    """
    env = os.environ if environ is None else environ

    token = env.get("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub token. "
            "Set the 'GITHUB_TOKEN' environment variable before running the report."
        )

    org_name = (org if org is not None else env.get("GITHUB_ORG", "")).strip()
    if not org_name:
        raise ConfigurationError("Missing GitHub organization. Pass --org or set 'GITHUB_ORG'.")

    return Credential(org=org_name, token=token)


class ConfigStore:
    """Holds the single credential used to call GitHub on behalf of callers.

    The credential is an immutable value swapped in with one assignment, so a
    concurrent reader sees either the old pair or the new pair.
    """

    def __init__(self, credential: Optional[Credential] = None) -> None:
        self._credential = credential

    def set_credential(self, token: Any, org: Any) -> Credential:
        """Validate and store a new credential, replacing any previous one.

        Raises:
            ValidationError: If either value is missing or blank. The stored
                credential is left untouched.
        """
        clean_token = token.strip() if isinstance(token, str) else ""
        clean_org = org.strip() if isinstance(org, str) else ""
        if not clean_token or not clean_org:
            raise ValidationError("Token and Organization are required.")

        credential = Credential(org=clean_org, token=clean_token)
        self._credential = credential
        logger.info("Credential configured", extra={"org": clean_org})
        return credential

    def get_status(self) -> ConfigStatus:
        credential = self._credential
        if credential is None:
            return ConfigStatus(has_token=False, org="")
        return ConfigStatus(has_token=True, org=credential.org)

    def current_credential(self) -> Optional[Credential]:
        """Return the stored credential for the metrics client only."""
        return self._credential
