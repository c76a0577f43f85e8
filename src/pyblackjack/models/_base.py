"""Base model and enum for contract data.

Every model inherits from :class:`BlackjackBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase gateway keys map
  automatically to snake_case fields.
* Frozen instances: snapshots are replaced, never mutated.
* A ``raw`` dict that captures the original payload.

Code enums inherit from :class:`BlackjackEnum` which adds an ``UNKNOWN``
member at ``-1`` and a ``_missing_`` hook that returns ``UNKNOWN``
for any value without a mapped member.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class BlackjackEnum(enum.IntEnum):
    """Base for contract code enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    Codes the contract sends that have no mapped member resolve to
    ``UNKNOWN`` instead of raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> BlackjackEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: BlackjackEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class BlackjackBaseModel(BaseModel):
    """Base for immutable models built from gateway/event payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original payload."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        """Keep the original payload unless ``raw`` was passed explicitly."""
        if not isinstance(values, dict):
            return values
        if "raw" in values:
            return values
        return {**values, "raw": dict(values)}
