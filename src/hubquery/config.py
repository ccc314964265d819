"""Configuration: frozen Config with explicit host/credential requirements."""

from __future__ import annotations

from dataclasses import dataclass, field
import os

from dotenv import load_dotenv

from hubquery.errors import ConfigurationError
from hubquery.retry import RetryPolicy

load_dotenv()

HOST_ENV_VAR = "HUBQUERY_HOST"
SAS_TOKEN_ENV_VAR = "HUBQUERY_SAS_TOKEN"

DEFAULT_API_VERSION = "2016-11-14"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for registry queries.

    Host and SAS token are auto-resolved from ``HUBQUERY_HOST`` and
    ``HUBQUERY_SAS_TOKEN`` when not passed. Mock mode needs neither.

    Example:
        config = Config(host="my-hub.azure-devices.net", sas_token=token)
    """

    host: str | None = None
    #: Pre-built shared access signature sent as the ``Authorization`` header.
    sas_token: str | None = None
    use_mock: bool = False
    page_size: int = 100
    timeout_s: float = 24.0
    api_version: str = DEFAULT_API_VERSION
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        """Auto-resolve host and token, then validate."""
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int):
            raise ConfigurationError(
                f"page_size must be an integer, got {type(self.page_size).__name__}",
            )
        if self.page_size < 1:
            raise ConfigurationError(
                f"page_size must be ≥ 1, got {self.page_size}",
                hint="This is the default number of items requested per page.",
            )
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This bounds each HTTP round trip in seconds.",
            )
        if not self.api_version.strip():
            raise ConfigurationError("api_version must be non-empty")

        if self.use_mock:
            return

        if self.host is None:
            object.__setattr__(self, "host", os.environ.get(HOST_ENV_VAR))
        if self.sas_token is None:
            object.__setattr__(self, "sas_token", os.environ.get(SAS_TOKEN_ENV_VAR))

        if not self.host:
            raise ConfigurationError(
                "Hub host required",
                hint=f"Set {HOST_ENV_VAR} environment variable or pass host=...",
            )
        if "/" in self.host or "://" in self.host:
            raise ConfigurationError(
                f"host must be a bare host name, got {self.host!r}",
                hint="Pass e.g. host='my-hub.azure-devices.net'.",
            )
        if not self.sas_token:
            raise ConfigurationError(
                "SAS token required",
                hint=f"Set {SAS_TOKEN_ENV_VAR} environment variable or pass sas_token=...",
            )

    @property
    def query_url(self) -> str:
        """Device query endpoint for this hub."""
        host = self.host or "mock.invalid"
        return f"https://{host}/devices/query?api-version={self.api_version}"

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(host={self.host!r}, "
            f"sas_token={'[REDACTED]' if self.sas_token else None}, "
            f"use_mock={self.use_mock}, page_size={self.page_size})"
        )

    __repr__ = __str__
