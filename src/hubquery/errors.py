"""Exception hierarchy for hubquery."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class HubQueryError(Exception):
    """Base exception for all hubquery errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(HubQueryError):
    """Configuration validation or resolution failed."""


class InvalidArgumentError(HubQueryError):
    """A query, page size, or result kind supplied by the caller is invalid."""


class QueryStateError(HubQueryError):
    """A query was iterated before any page was fetched."""


class UnsupportedKindError(HubQueryError):
    """The result kind is known but its decoding is not implemented.

    Kept outside ``DecodeError`` so callers can tell a missing feature apart
    from bad data.
    """

    def __init__(self, message: str, *, hint: str | None = None, kind: str) -> None:
        super().__init__(message, hint=hint)
        self.kind = kind


# --- Decoding ---------------------------------------------------------------


class DecodeError(HubQueryError):
    """A page body could not be interpreted as its declared kind."""


class MalformedArrayError(DecodeError):
    """The body is not a JSON array of JSON objects."""


class InvalidTwinError(DecodeError):
    """An item does not have the shape of a device twin."""


class UnknownKindError(DecodeError):
    """Decoding was requested for the UNKNOWN kind."""


class ExhaustedError(DecodeError):
    """A page iterator was read past its last item."""


# --- Protocol ---------------------------------------------------------------


class ProtocolError(HubQueryError):
    """The service response violates the negotiated query contract."""


class UndeclaredResultTypeError(ProtocolError):
    """The response did not declare a known item type."""


class ResultTypeMismatchError(ProtocolError):
    """The response declared a different item type than the query asked for."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        requested: str | None = None,
        received: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.requested = requested
        self.received = received


class DecodeFailedError(ProtocolError):
    """The response body failed to decode; the cause is chained."""


# --- Transport --------------------------------------------------------------


class TransportError(HubQueryError):
    """HTTP call failed.

    The transport attaches retry metadata so its retry loop can stay bounded
    without substring matching. Query execution passes these through.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        retry_after_s: float | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.retryable = retryable
        self.status_code = status_code
        self.retry_after_s = retry_after_s


class ThrottledError(TransportError):
    """Request throttled by the service (HTTP 429)."""


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
