"""Test helpers (small, reusable doubles and payloads).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off transport classes as coverage expands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

from hubquery.transport.base import TransportResponse

TWIN_ITEM: dict[str, Any] = {
    "deviceId": "devA",
    "generationId": "123",
    "status": "enabled",
    "statusReason": "provisioned",
    "connectionState": "connected",
    "connectionStateUpdatedTime": "2015-02-28T16:24:48.789Z",
    "lastActivityTime": "2015-02-30T16:24:48.789Z",
    "tags": {
        "$etag": "123",
        "deploymentLocation": {"building": "43", "floor": "1"},
    },
    "properties": {
        "desired": {
            "telemetryConfig": {"sendFrequency": "5m"},
            "$metadata": {},
            "$version": 1,
        },
        "reported": {
            "telemetryConfig": {"sendFrequency": "5m", "status": "success"},
            "batteryLevel": 55,
            "$metadata": {},
            "$version": 4,
        },
    },
}


def page(
    items: list[dict[str, Any]],
    *,
    item_type: str | None = "twin",
    token: str | None = None,
    extra_headers: dict[str, str] | None = None,
) -> TransportResponse:
    """Build a 200 response carrying ``items`` with the given paging headers."""
    headers: dict[str, str] = {}
    if item_type is not None:
        headers["x-ms-item-type"] = item_type
    if token is not None:
        headers["x-ms-continuation"] = token
    headers.update(extra_headers or {})
    return TransportResponse(
        status_code=200, headers=headers, body=json.dumps(items).encode("utf-8")
    )


@dataclass
class FakeTransport:
    """Transport test double returning a scripted sequence of results.

    Each entry is a TransportResponse to return or an exception to raise.
    Every call is recorded for assertions on the request side.
    """

    script: list[TransportResponse | BaseException] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False

    def send(
        self,
        url: str,
        *,
        method: str,
        body: bytes,
        headers: dict[str, str],
        timeout_s: float,
    ) -> TransportResponse:
        self.calls.append(
            {
                "url": url,
                "method": method,
                "body": body,
                "headers": dict(headers),
                "timeout_s": timeout_s,
            }
        )
        if not self.script:
            raise AssertionError("FakeTransport script exhausted")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    @property
    def last_headers(self) -> dict[str, str]:
        return self.calls[-1]["headers"]
