"""Page decoding: turn a JSON array body into typed items by declared kind.

Decoding is a pure function of ``(kind, body)``. Each kind has one decoder
and ``decode_items`` dispatches with a single ``match``:

- ``TWIN``: each object goes through :func:`hubquery.twin.parse_twin`.
- ``RAW`` / ``JSON``: pass-through; each object is re-serialized to compact
  JSON text with key order preserved.
- ``DEVICE_JOB`` / ``JOB_RESPONSE``: known but not implemented; raises
  :class:`UnsupportedKindError` rather than a decode failure.
- ``UNKNOWN``: rejected with :class:`UnknownKindError`.
"""

from __future__ import annotations

import json
from typing import Any, TypeAlias

from hubquery.errors import MalformedArrayError, UnknownKindError, UnsupportedKindError
from hubquery.kinds import ResultKind
from hubquery.twin import Twin, parse_twin

DecodedItem: TypeAlias = Twin | str


def decode_items(kind: ResultKind, body: str | bytes) -> list[DecodedItem]:
    """Decode one page body into an ordered list of items.

    Args:
        kind: The page's declared result kind.
        body: JSON text (or UTF-8 bytes) holding an array of objects.

    Returns:
        Items in the order they appear in the array.

    Raises:
        UnknownKindError: If ``kind`` is ``UNKNOWN``.
        MalformedArrayError: If ``body`` is not a JSON array of objects.
        InvalidTwinError: If a ``TWIN`` item has an invalid shape.
        UnsupportedKindError: For ``DEVICE_JOB`` and ``JOB_RESPONSE``.
    """
    if kind is ResultKind.UNKNOWN:
        raise UnknownKindError(
            "Cannot decode a page of unknown kind",
            hint="The item type must be negotiated before decoding.",
        )

    objects = parse_object_array(body)

    match kind:
        case ResultKind.TWIN:
            return [parse_twin(obj) for obj in objects]
        case ResultKind.RAW | ResultKind.JSON:
            return [canonical_json(obj) for obj in objects]
        case ResultKind.DEVICE_JOB | ResultKind.JOB_RESPONSE:
            raise UnsupportedKindError(
                f"Decoding {kind.value!r} items is not implemented",
                hint="Query with the 'raw' or 'json' item type to read these items as JSON text.",
                kind=kind.value,
            )
        case _:  # pragma: no cover - exhaustive over ResultKind
            raise UnknownKindError(f"Unhandled result kind: {kind!r}")


def parse_object_array(body: str | bytes) -> list[dict[str, Any]]:
    """Parse ``body`` as a JSON array whose elements are all objects."""
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedArrayError(f"Body is not valid UTF-8: {e}") from e

    if not isinstance(body, str) or not body.strip():
        raise MalformedArrayError("Body is empty")

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedArrayError(f"Malformed JSON: {e.msg} (pos {e.pos})") from e
    except RecursionError as e:
        raise MalformedArrayError("Malformed JSON: nesting too deep") from e

    if not isinstance(parsed, list):
        raise MalformedArrayError(
            f"Expected a JSON array, got {type(parsed).__name__}",
        )
    for i, item in enumerate(parsed):
        if not isinstance(item, dict):
            raise MalformedArrayError(
                f"Expected a JSON object at index {i}, got {type(item).__name__}",
            )
    return parsed


def canonical_json(obj: dict[str, Any]) -> str:
    """Compact JSON text for one item; key order is preserved, non-ASCII kept."""
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
