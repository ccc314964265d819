"""Result kinds a query page can declare."""

from __future__ import annotations

from enum import Enum


class ResultKind(str, Enum):
    """Declared shape of the items in a query page.

    Values are the wire spellings used by the ``x-ms-item-type`` header.
    ``UNKNOWN`` means "not negotiated yet" and is never a valid request.
    """

    UNKNOWN = "unknown"
    TWIN = "twin"
    DEVICE_JOB = "deviceJob"
    JOB_RESPONSE = "jobResponse"
    RAW = "raw"
    JSON = "json"

    @classmethod
    def from_header(cls, value: str | None) -> ResultKind:
        """Map a header value to a kind; anything unrecognized is ``UNKNOWN``."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN
