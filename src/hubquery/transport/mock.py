"""In-memory mock of the registry query endpoint for tests and offline use."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

from hubquery._http import CONTINUATION_TOKEN_HEADER, ITEM_TYPE_HEADER, PAGE_SIZE_HEADER
from hubquery.kinds import ResultKind
from hubquery.transport._errors import error_for_status
from hubquery.transport.base import TransportResponse

_DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True)
class RecordedRequest:
    """One request as seen by the mock."""

    url: str
    method: str
    body: bytes
    headers: dict[str, str]
    timeout_s: float

    def query_text(self) -> str:
        """Decode the query envelope sent in the body."""
        return str(json.loads(self.body)["query"])


@dataclass
class MockTransport:
    """Serve ``items`` in pages the way the registry does.

    Honors the page-size header, resumes from an offset continuation token,
    declares ``kind`` on every page, and only returns a continuation token
    while more items remain. The query text itself is not evaluated.
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    kind: ResultKind = ResultKind.TWIN
    requests: list[RecordedRequest] = field(default_factory=list)

    def send(
        self,
        url: str,
        *,
        method: str,
        body: bytes,
        headers: dict[str, str],
        timeout_s: float,
    ) -> TransportResponse:
        """Record the request and return the page it asks for."""
        self.requests.append(
            RecordedRequest(
                url=url,
                method=method,
                body=body,
                headers=dict(headers),
                timeout_s=timeout_s,
            )
        )

        page_size = _DEFAULT_PAGE_SIZE
        raw_size = headers.get(PAGE_SIZE_HEADER)
        if raw_size is not None:
            page_size = int(raw_size)

        offset = 0
        token = headers.get(CONTINUATION_TOKEN_HEADER)
        if token is not None:
            if not token.isdigit() or int(token) > len(self.items):
                raise error_for_status(
                    400, {}, f"Invalid continuation token: {token!r}".encode()
                )
            offset = int(token)

        end = min(offset + page_size, len(self.items))
        page = self.items[offset:end]

        response_headers = {ITEM_TYPE_HEADER: self.kind.value}
        if end < len(self.items):
            response_headers[CONTINUATION_TOKEN_HEADER] = str(end)

        return TransportResponse(
            status_code=200,
            headers=response_headers,
            body=json.dumps(page).encode("utf-8"),
        )

    def close(self) -> None:
        """Nothing to release."""
