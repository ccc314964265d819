"""hubquery: paged, type-negotiated queries against a device registry.

Public API:
    - DeviceTwinClient: query_twin()/query() and page walking
    - Query: one paged query session (execute, continue_query)
    - QueryResponse: one decoded page as a forward-only iterator
    - ResultKind: declared item types
    - Config: configuration dataclass
    - HttpxTransport / MockTransport: real and in-memory transports
"""

from __future__ import annotations

import logging

from hubquery.client import DeviceTwinClient
from hubquery.config import Config
from hubquery.decoder import DecodedItem, decode_items
from hubquery.errors import (
    ConfigurationError,
    DecodeError,
    DecodeFailedError,
    ExhaustedError,
    HubQueryError,
    InvalidArgumentError,
    InvalidTwinError,
    MalformedArrayError,
    ProtocolError,
    QueryStateError,
    ResultTypeMismatchError,
    ThrottledError,
    TransportError,
    UndeclaredResultTypeError,
    UnknownKindError,
    UnsupportedKindError,
)
from hubquery.kinds import ResultKind
from hubquery.query import Query
from hubquery.response import QueryResponse
from hubquery.retry import RetryPolicy
from hubquery.transport import HttpxTransport, MockTransport, Transport, TransportResponse
from hubquery.twin import Twin, parse_twin

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("hubquery")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("hubquery").addHandler(logging.NullHandler())

# Re-export for convenience
__all__ = [
    "Config",
    "ConfigurationError",
    "DecodeError",
    "DecodeFailedError",
    "DecodedItem",
    "DeviceTwinClient",
    "ExhaustedError",
    "HttpxTransport",
    "HubQueryError",
    "InvalidArgumentError",
    "InvalidTwinError",
    "MalformedArrayError",
    "MockTransport",
    "ProtocolError",
    "Query",
    "QueryResponse",
    "QueryStateError",
    "ResultKind",
    "ResultTypeMismatchError",
    "RetryPolicy",
    "ThrottledError",
    "Transport",
    "TransportError",
    "TransportResponse",
    "Twin",
    "UndeclaredResultTypeError",
    "UnknownKindError",
    "UnsupportedKindError",
    "decode_items",
    "parse_twin",
]
