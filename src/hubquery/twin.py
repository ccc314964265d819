"""Device twin model: the item shape of ``twin`` query pages."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from hubquery.errors import InvalidTwinError


class TwinProperties(BaseModel):
    """Desired and reported property documents, ``$metadata``/``$version`` included."""

    desired: dict[str, Any] = Field(default_factory=dict)
    reported: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "allow"}


class Twin(BaseModel):
    """A device twin record as returned by the registry.

    Field names follow Python conventions; the wire names are accepted as
    aliases and unknown keys are preserved for forward compatibility.
    """

    device_id: str = Field(alias="deviceId", min_length=1)
    generation_id: str | None = Field(default=None, alias="generationId")
    etag: str | None = None
    version: int | None = None
    status: str | None = None
    status_reason: str | None = Field(default=None, alias="statusReason")
    connection_state: str | None = Field(default=None, alias="connectionState")
    connection_state_updated_time: str | None = Field(
        default=None, alias="connectionStateUpdatedTime"
    )
    last_activity_time: str | None = Field(default=None, alias="lastActivityTime")
    tags: dict[str, Any] = Field(default_factory=dict)
    properties: TwinProperties = Field(default_factory=TwinProperties)

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        """Treat an explicit ``null`` tags document as empty."""
        return {} if v is None else v

    @field_validator("properties", mode="before")
    @classmethod
    def normalize_properties(cls, v: Any) -> Any:
        """Treat an explicit ``null`` properties document as empty."""
        return {} if v is None else v

    @property
    def desired_properties(self) -> dict[str, Any]:
        """Desired properties without the service's ``$``-prefixed bookkeeping."""
        return _strip_metadata(self.properties.desired)

    @property
    def reported_properties(self) -> dict[str, Any]:
        """Reported properties without the service's ``$``-prefixed bookkeeping."""
        return _strip_metadata(self.properties.reported)

    def to_json(self) -> str:
        """Serialize back to the wire shape."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


def _strip_metadata(doc: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in doc.items() if not k.startswith("$")}


def parse_twin(obj: dict[str, Any] | str) -> Twin:
    """Parse one twin item from a decoded JSON object or its JSON text.

    Raises:
        InvalidTwinError: If the item is not a JSON object of twin shape.
    """
    if isinstance(obj, str):
        try:
            obj = json.loads(obj)
        except json.JSONDecodeError as e:
            raise InvalidTwinError(f"Twin is not valid JSON: {e.msg}") from e

    if not isinstance(obj, dict):
        raise InvalidTwinError(
            f"Twin must be a JSON object, got {type(obj).__name__}",
        )

    try:
        return Twin.model_validate(obj)
    except ValidationError as e:
        raise InvalidTwinError(
            f"Invalid twin: {e.error_count()} validation error(s)",
            hint="Each twin item needs at least a non-empty 'deviceId'.",
        ) from e
