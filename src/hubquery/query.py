"""Paged query execution with continuation and item-type negotiation.

A :class:`Query` is a session for one logical query. Each :meth:`Query.execute`
call fetches exactly one page:

1. Send the query envelope with the page-size header and, when resuming, the
   continuation header.
2. Read the continuation token and declared item type from the response.
3. Require the declared item type to equal the requested kind.
4. Decode the body into a :class:`~hubquery.response.QueryResponse`.

State is committed only after all steps succeed, so a failed call leaves the
query as it was and can be retried. Continuation is caller-driven: read
:attr:`Query.continuation_token` and call ``execute`` again for the next page.

Instances are not thread-safe; serialize calls on a shared instance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hubquery._http import CONTINUATION_TOKEN_HEADER, ITEM_TYPE_HEADER
from hubquery.errors import (
    DecodeError,
    DecodeFailedError,
    InvalidArgumentError,
    QueryStateError,
    ResultTypeMismatchError,
    UndeclaredResultTypeError,
)
from hubquery.kinds import ResultKind
from hubquery.request import (
    build_query_body,
    build_query_headers,
    validate_page_size,
    validate_query,
)
from hubquery.response import QueryResponse

if TYPE_CHECKING:
    from hubquery.decoder import DecodedItem
    from hubquery.transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 24.0


class Query:
    """SQL-style registry query for twins, jobs, device jobs, or raw data."""

    def __init__(self, query: str, page_size: int, kind: ResultKind) -> None:
        """Validate inputs and start in the not-yet-executed state.

        Raises:
            InvalidArgumentError: If the query text is invalid, ``page_size``
                is not positive, or ``kind`` is ``UNKNOWN``.
        """
        validate_query(query)
        validate_page_size(page_size)
        if not isinstance(kind, ResultKind) or kind is ResultKind.UNKNOWN:
            raise InvalidArgumentError(
                f"Cannot process a query of kind {kind!r}",
                hint="Request one of: twin, deviceJob, jobResponse, raw, json.",
            )

        self._query = query
        self._page_size = page_size
        self._requested_kind = kind
        self._request_token: str | None = None
        self._response_token: str | None = None
        self._response_kind = ResultKind.UNKNOWN
        self._response: QueryResponse | None = None

    @property
    def query(self) -> str:
        return self._query

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def requested_kind(self) -> ResultKind:
        return self._requested_kind

    @property
    def pending_token(self) -> str | None:
        """Token that the next ``execute`` call will send, if any."""
        return self._request_token

    @property
    def continuation_token(self) -> str | None:
        """Token returned with the latest page; ``None`` means it was the last one."""
        return self._response_token

    @property
    def response_kind(self) -> ResultKind:
        """Item type declared by the latest page; ``UNKNOWN`` before the first."""
        return self._response_kind

    @property
    def last_response(self) -> QueryResponse | None:
        return self._response

    def continue_query(self, continuation_token: str, page_size: int | None = None) -> None:
        """Set the token (and optionally a new page size) for the next call.

        The token is opaque and stored as given. The update is all-or-nothing:
        an invalid ``page_size`` leaves both token and page size unchanged.

        Raises:
            InvalidArgumentError: If ``page_size`` is given and not positive.
        """
        if page_size is not None:
            validate_page_size(page_size)
            self._page_size = page_size
        self._request_token = continuation_token

    def execute(
        self,
        transport: Transport,
        url: str,
        *,
        method: str = "POST",
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> QueryResponse:
        """Fetch one page and make it the current page.

        Raises:
            TransportError: Passed through from the transport unchanged.
            UndeclaredResultTypeError: If the item type header is missing or
                not a known kind.
            ResultTypeMismatchError: If the declared item type differs from
                the requested kind.
            DecodeFailedError: If the body does not decode as that kind.
            UnsupportedKindError: If decoding for that kind is not implemented.
        """
        headers = build_query_headers(self._page_size, self._request_token)
        logger.debug(
            "Query request: kind=%s page_size=%d resuming=%s",
            self._requested_kind.value,
            self._page_size,
            bool(self._request_token),
        )

        http_response = transport.send(
            url,
            method=method,
            body=build_query_body(self._query),
            headers=headers,
            timeout_s=timeout_s,
        )

        response_token: str | None = None
        response_kind = ResultKind.UNKNOWN
        for key, value in http_response.headers.items():
            if key == CONTINUATION_TOKEN_HEADER:
                response_token = value
            elif key == ITEM_TYPE_HEADER:
                response_kind = ResultKind.from_header(value)

        if response_kind is ResultKind.UNKNOWN:
            raise UndeclaredResultTypeError(
                "Query response type is not defined by the service",
                hint=f"The response must carry a known '{ITEM_TYPE_HEADER}' header.",
            )

        if response_kind is not self._requested_kind:
            raise ResultTypeMismatchError(
                f"Query response type {response_kind.value!r} does not match "
                f"requested type {self._requested_kind.value!r}",
                requested=self._requested_kind.value,
                received=response_kind.value,
            )

        try:
            response = QueryResponse(response_kind, http_response.body)
        except DecodeError as e:
            raise DecodeFailedError(
                f"Could not decode {response_kind.value!r} page: {e}",
                hint=e.hint,
            ) from e

        self._response_token = response_token
        self._request_token = response_token
        self._response_kind = response_kind
        self._response = response
        logger.debug(
            "Query page: kind=%s items=%d more=%s",
            response_kind.value,
            len(response),
            response_token is not None,
        )
        return response

    def _current(self) -> QueryResponse:
        if self._response is None:
            raise QueryStateError(
                "Query has no page to iterate",
                hint="Call execute() before has_next()/next().",
            )
        return self._response

    def has_next(self) -> bool:
        """Return True while the current page has unread items."""
        return self._current().has_next()

    def next(self) -> DecodedItem:
        """Return the next item of the current page.

        Raises:
            QueryStateError: If no page has been fetched yet.
            ExhaustedError: If the current page is fully read.
        """
        return self._current().next()

    def __repr__(self) -> str:
        return (
            f"Query(query={self._query!r}, page_size={self._page_size}, "
            f"kind={self._requested_kind.value!r}, "
            f"response_kind={self._response_kind.value!r})"
        )
