"""One decoded query page exposed as a single-pass iterator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hubquery.decoder import DecodedItem, decode_items
from hubquery.errors import ExhaustedError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from hubquery.kinds import ResultKind


class QueryResponse:
    """A page of decoded items with a forward-only cursor.

    The body is decoded once, at construction; decode failures propagate from
    the constructor. The cursor only moves forward and cannot be reset, so a
    new instance is built for every page. Not safe for concurrent readers.
    """

    __slots__ = ("_cursor", "_items", "_kind")

    def __init__(self, kind: ResultKind, body: str | bytes) -> None:
        self._kind = kind
        self._items: tuple[DecodedItem, ...] = tuple(decode_items(kind, body))
        self._cursor = 0

    @property
    def kind(self) -> ResultKind:
        """Declared kind of every item in this page."""
        return self._kind

    def __len__(self) -> int:
        return len(self._items)

    def has_next(self) -> bool:
        """Return True while unread items remain."""
        return self._cursor < len(self._items)

    def next(self) -> DecodedItem:
        """Return the next unread item and advance the cursor.

        Raises:
            ExhaustedError: If every item has already been read.
        """
        if not self.has_next():
            raise ExhaustedError(
                f"No more items in this page ({len(self._items)} read)",
                hint="Check has_next() before calling next().",
            )
        item = self._items[self._cursor]
        self._cursor += 1
        return item

    def __iter__(self) -> Iterator[DecodedItem]:
        return self

    def __next__(self) -> DecodedItem:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __repr__(self) -> str:
        return (
            f"QueryResponse(kind={self._kind.value!r}, items={len(self._items)}, "
            f"read={self._cursor})"
        )
