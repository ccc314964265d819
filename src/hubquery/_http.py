"""Small HTTP-related constants shared across hubquery.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

# Query paging headers. Response keys are matched exactly.
CONTINUATION_TOKEN_HEADER = "x-ms-continuation"
ITEM_TYPE_HEADER = "x-ms-item-type"
PAGE_SIZE_HEADER = "x-ms-max-item-count"

# Retryable status codes shared by error mapping and transport retry.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 409, 429, 500, 502, 503, 504})
