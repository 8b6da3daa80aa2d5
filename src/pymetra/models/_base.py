"""Base model for Metra API records.

Every record model inherits from :class:`MetraBaseModel` which provides:

* a ``model_validator(mode="before")`` that runs the systematic
  key-casing transform (:func:`pymetra.ingestion.normalize.normalize_keys`),
  so ``routeId`` and ``route_id`` decode identically.
* stripping of empty-string values so the field default is used.
* a ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_snake

from pymetra.ingestion.normalize import normalize_keys


class MetraBaseModel(BaseModel):
    """Base for Metra API record models.

    Records are frozen: a snapshot is replaced wholesale, never patched.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API record."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Snake-case the keys of *values* and drop empty values.

        ``raw`` is carried through untouched. Subclass validators that
        reshape nested payloads call this before reading keys, since they may
        run ahead of the base validator.
        """
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if key == "raw":
                cleaned[key] = value
                continue
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            cleaned[to_snake(str(key))] = normalize_keys(value)
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _normalize_payload(cls, values: Any) -> Any:
        """Normalize key casing, drop empty strings and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = MetraBaseModel._clean_dict(values)

        # Keep an explicitly passed raw= (kwargs construction in tests).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
