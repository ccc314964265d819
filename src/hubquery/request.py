"""Query request building: text validation, body envelope, and paging headers."""

from __future__ import annotations

import json
import re

from hubquery._http import CONTINUATION_TOKEN_HEADER, PAGE_SIZE_HEADER
from hubquery.errors import InvalidArgumentError

_SELECT_RE = re.compile(r"\bselect\b", re.IGNORECASE)
_FROM_RE = re.compile(r"\bfrom\b", re.IGNORECASE)


def validate_query(text: object) -> str:
    """Validate a query expression and return it unchanged.

    The registry query language is SQL-like; only its outline is checked
    here: a ``SELECT`` keyword followed somewhere later by ``FROM``.

    Raises:
        InvalidArgumentError: If the text is blank or lacks that outline.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidArgumentError(
            "Query is empty or whitespace-only",
            hint="Pass a query such as 'SELECT * FROM devices'.",
        )

    select = _SELECT_RE.search(text)
    if select is None or _FROM_RE.search(text, select.end()) is None:
        raise InvalidArgumentError(
            f"Query is malformed: {text!r}",
            hint="Queries need a SELECT clause followed by a FROM clause.",
        )
    return text


def validate_page_size(page_size: object) -> int:
    """Return ``page_size`` if it is a positive integer."""
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise InvalidArgumentError(
            f"page_size must be an integer, got {type(page_size).__name__}",
        )
    if page_size <= 0:
        raise InvalidArgumentError(
            f"page_size cannot be zero or negative, got {page_size}",
            hint="Pass page_size=100 or another positive value.",
        )
    return page_size


def build_query_body(text: str) -> bytes:
    """Serialize the query request envelope sent as the POST body."""
    return json.dumps({"query": text}, ensure_ascii=False).encode("utf-8")


def build_query_headers(
    page_size: int, continuation_token: str | None = None
) -> dict[str, str]:
    """Paging headers for one request.

    The continuation header is only sent for a non-empty token; omitting it starts
    the query from the beginning.
    """
    headers = {PAGE_SIZE_HEADER: str(page_size)}
    if continuation_token:
        headers[CONTINUATION_TOKEN_HEADER] = continuation_token
    return headers
