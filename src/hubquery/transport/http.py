"""httpx-backed transport for the device registry REST API."""

from __future__ import annotations

from typing import TYPE_CHECKING
import uuid

import httpx

from hubquery.retry import RetryPolicy, retry_call
from hubquery.transport._errors import error_for_status, wrap_transport_error
from hubquery.transport.base import TransportResponse

if TYPE_CHECKING:
    from types import TracebackType

USER_AGENT = "hubquery-python"


class HttpxTransport:
    """Synchronous transport over a pooled ``httpx.Client``.

    Adds authorization and content headers, retries transient failures under
    ``retry``, and raises ``TransportError`` for network failures and non-2xx
    responses. Response header names are lower-cased.
    """

    def __init__(
        self,
        sas_token: str | None = None,
        *,
        retry: RetryPolicy | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Create a transport; pass ``client`` to reuse or stub the HTTP client."""
        self._sas_token = sas_token
        self._retry = retry or RetryPolicy()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Lazily create the pooled client."""
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def _base_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json; charset=utf-8",
            "User-Agent": USER_AGENT,
            "Request-Id": str(uuid.uuid4()),
        }
        if self._sas_token:
            headers["Authorization"] = self._sas_token
        return headers

    def send(
        self,
        url: str,
        *,
        method: str,
        body: bytes,
        headers: dict[str, str],
        timeout_s: float,
    ) -> TransportResponse:
        """Send one request, retrying transient failures."""
        client = self._get_client()
        request_headers = {**self._base_headers(), **headers}

        def _attempt() -> TransportResponse:
            try:
                resp = client.request(
                    method,
                    url,
                    content=body,
                    headers=request_headers,
                    timeout=timeout_s,
                )
            except httpx.HTTPError as e:
                raise wrap_transport_error(e) from e

            resp_headers = {k.lower(): v for k, v in resp.headers.items()}
            if not 200 <= resp.status_code < 300:
                raise error_for_status(resp.status_code, resp_headers, resp.content)
            return TransportResponse(
                status_code=resp.status_code,
                headers=resp_headers,
                body=resp.content,
            )

        return retry_call(_attempt, policy=self._retry)

    def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
