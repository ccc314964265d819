"""Device twin client: the query surface most callers use."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from hubquery.errors import InvalidArgumentError
from hubquery.kinds import ResultKind
from hubquery.query import Query

if TYPE_CHECKING:
    from types import TracebackType

    from hubquery.config import Config
    from hubquery.response import QueryResponse
    from hubquery.transport.base import Transport
    from hubquery.twin import Twin

logger = logging.getLogger(__name__)


class DeviceTwinClient:
    """Run registry queries and walk their pages.

    Continuation stays in the caller's hands: each page is fetched by an
    explicit call, and :meth:`fetch_next_page` only resumes when the service
    handed back a continuation token.

    Example:
        with DeviceTwinClient(Config()) as client:
            query = client.query_twin("SELECT * FROM devices", page_size=50)
            while True:
                while client.has_next_device_twin(query):
                    print(client.get_next_device_twin(query).device_id)
                if client.fetch_next_page(query) is None:
                    break
    """

    def __init__(self, config: Config, *, transport: Transport | None = None) -> None:
        """Create a client; ``transport`` overrides the one derived from config."""
        self.config = config
        self._transport = transport if transport is not None else _get_transport(config)

    @property
    def transport(self) -> Transport:
        return self._transport

    def query(self, sql: str, kind: ResultKind, page_size: int | None = None) -> Query:
        """Create a query for ``kind`` items and fetch its first page."""
        q = Query(sql, page_size if page_size is not None else self.config.page_size, kind)
        self._execute(q)
        return q

    def query_twin(self, sql: str, page_size: int | None = None) -> Query:
        """Create a twin query and fetch its first page."""
        return self.query(sql, ResultKind.TWIN, page_size)

    def has_next_device_twin(self, query: Query) -> bool:
        """Return True while the query's current page has unread twins."""
        return _require_twin_query(query).has_next()

    def get_next_device_twin(self, query: Query) -> Twin:
        """Return the next twin from the query's current page."""
        return cast("Twin", _require_twin_query(query).next())

    def fetch_next_page(self, query: Query) -> QueryResponse | None:
        """Fetch the page after the current one, or return None on the last page."""
        q = _require_query(query)
        if q.last_response is None:
            return self._execute(q)
        if q.continuation_token is None:
            return None
        return self._execute(q)

    def _execute(self, query: Query) -> QueryResponse:
        return query.execute(
            self._transport,
            self.config.query_url,
            method="POST",
            timeout_s=self.config.timeout_s,
        )

    def close(self) -> None:
        """Release the transport."""
        self._transport.close()

    def __enter__(self) -> DeviceTwinClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _require_query(query: Query | None) -> Query:
    if query is None:
        raise InvalidArgumentError(
            "Query cannot be None",
            hint="Pass the Query returned by query_twin() or query().",
        )
    return query


def _require_twin_query(query: Query | None) -> Query:
    q = _require_query(query)
    if q.requested_kind is not ResultKind.TWIN:
        raise InvalidArgumentError(
            f"Query returns {q.requested_kind.value!r} items, not twins",
            hint="Use query.has_next()/query.next() for non-twin queries.",
        )
    return q


def _get_transport(config: Config) -> Transport:
    """Get the appropriate transport based on configuration."""
    if config.use_mock:
        from hubquery.transport.mock import MockTransport

        logger.debug("Using in-memory mock transport")
        return MockTransport()

    from hubquery.transport.http import HttpxTransport

    return HttpxTransport(config.sas_token, retry=config.retry)
