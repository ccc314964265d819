"""Transport implementations."""

from __future__ import annotations

from .base import Transport, TransportResponse
from .http import HttpxTransport
from .mock import MockTransport, RecordedRequest

__all__ = [
    "HttpxTransport",
    "MockTransport",
    "RecordedRequest",
    "Transport",
    "TransportResponse",
]
