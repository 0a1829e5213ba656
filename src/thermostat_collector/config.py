"""Process-wide configuration of the collector.

`Settings.from_env` is the only place where the environment is read. The
resulting objects are handed explicitly to each component so that every
component can be exercised with synthetic configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from thermostat_collector.exceptions import ConfigMissingError, CredentialsMissingError

DEFAULT_API_URL = "https://api.danfoss.com"
DEFAULT_REGION = "eu-central-1"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_INTERVAL_MINUTES = 15


def _getenv(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True)
class Credentials:
    """API key and secret used for the client-credentials grant."""

    api_key: Optional[str]
    api_secret: Optional[str] = field(repr=False)

    def validate(self) -> None:
        """Raises `CredentialsMissingError` if the key or the secret is absent."""
        missing = [
            name
            for name, value in (
                ("DANFOSS_API_KEY", self.api_key),
                ("DANFOSS_API_SECRET", self.api_secret),
            )
            if not value
        ]
        if missing:
            raise CredentialsMissingError(
                f"Credentials for API missing: {', '.join(missing)}"
            )


@dataclass(frozen=True)
class Destination:
    """Timestream database and table receiving the measurements."""

    database: Optional[str]
    table: Optional[str]
    region: str = DEFAULT_REGION

    def validate(self) -> None:
        """Raises `ConfigMissingError` if the database or the table name is absent."""
        if not self.database:
            raise ConfigMissingError("TIMESTREAM_DATABASE variable not set.")
        if not self.table:
            raise ConfigMissingError("TIMESTREAM_TABLE variable not set.")


@dataclass(frozen=True)
class Settings:
    credentials: Credentials
    destination: Destination
    api_url: str = DEFAULT_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES

    @classmethod
    def from_env(cls) -> "Settings":
        """Builds the settings from environment variables.

        Blank values are treated as missing. Missing credentials or destination
        names are not rejected here; they are reported by the component that
        needs them, in pipeline order.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        return cls(
            credentials=Credentials(
                api_key=_getenv("DANFOSS_API_KEY"),
                api_secret=_getenv("DANFOSS_API_SECRET"),
            ),
            destination=Destination(
                database=_getenv("TIMESTREAM_DATABASE"),
                table=_getenv("TIMESTREAM_TABLE"),
                region=_getenv("AWS_REGION") or DEFAULT_REGION,
            ),
            api_url=(_getenv("DANFOSS_API_URL") or DEFAULT_API_URL).rstrip("/"),
            http_timeout=float(_getenv("HTTP_TIMEOUT_SECONDS") or DEFAULT_HTTP_TIMEOUT),
            interval_minutes=int(
                _getenv("COLLECT_INTERVAL_MINUTES") or DEFAULT_INTERVAL_MINUTES
            ),
        )
