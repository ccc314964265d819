"""Transport-side error helpers.

Failures are mapped into TransportError with retry metadata so the retry loop
can stay bounded and deterministic without substring matching.
"""

from __future__ import annotations

from typing import Any

import httpx

from hubquery._http import RETRYABLE_STATUS_CODES
from hubquery.errors import ThrottledError, TransportError, _walk_exception_chain


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def parse_retry_after(raw: Any) -> float | None:
    """Parse a ``Retry-After`` header given in seconds."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        seconds = float(raw)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _auth_hint(status_code: int | None) -> str | None:
    if status_code in {401, 403}:
        return "Check the SAS token (try setting HUBQUERY_SAS_TOKEN or Config.sas_token)."
    return None


def error_for_status(
    status_code: int, headers: dict[str, str], body: bytes
) -> TransportError:
    """Build the error for a non-2xx HTTP response."""
    retry_after_s = parse_retry_after(headers.get("retry-after"))
    err_cls: type[TransportError] = (
        ThrottledError if status_code == 429 else TransportError
    )
    detail = body.decode("utf-8", errors="replace").strip()
    message = f"Query request failed (status={status_code})"
    return err_cls(
        f"{message}: {detail}" if detail else message,
        hint=_auth_hint(status_code),
        retryable=status_code in RETRYABLE_STATUS_CODES or retry_after_s is not None,
        status_code=status_code,
        retry_after_s=retry_after_s,
    )


def wrap_transport_error(exc: BaseException, *, message: str | None = None) -> TransportError:
    """Map httpx exceptions into TransportError with stable retry metadata."""
    # Already wrapped: pass through untouched.
    if isinstance(exc, TransportError):
        return exc

    status_code = extract_status_code(exc)
    retryable = isinstance(status_code, int) and status_code in RETRYABLE_STATUS_CODES
    if not retryable:
        for e in _walk_exception_chain(exc):
            if isinstance(e, (httpx.TimeoutException, httpx.RequestError)):
                retryable = True
                break

    msg = message or "Query request failed"
    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = str(exc)
    err_cls: type[TransportError] = (
        ThrottledError if status_code == 429 else TransportError
    )
    return err_cls(
        f"{msg}{status_note}: {cause}" if cause else f"{msg}{status_note}",
        hint=_auth_hint(status_code),
        retryable=retryable,
        status_code=status_code,
    )
