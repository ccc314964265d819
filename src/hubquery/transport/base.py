"""Transport protocol: the one HTTP round trip a query page needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers, and raw body of one HTTP response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


@runtime_checkable
class Transport(Protocol):
    """Minimal transport protocol: send one request, return one response.

    Implementations own authentication, TLS, and transport-level retries.
    Failures are raised as ``TransportError``.
    """

    def send(
        self,
        url: str,
        *,
        method: str,
        body: bytes,
        headers: dict[str, str],
        timeout_s: float,
    ) -> TransportResponse:
        """Send a request and return the response."""
        ...

    def close(self) -> None:
        """Release any pooled connections."""
        ...
