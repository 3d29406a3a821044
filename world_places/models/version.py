"""Pydantic model for the registry version stamp.

Consumers compare ``hash`` against their cached copy to decide whether
derived data must be rebuilt. ``revision`` is a coarse, informational
calendar date.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, field_validator


class VersionMeta(BaseModel):
    """Content version of a place registry.

    Attributes:
        hash: Prefixed, truncated SHA-256 of the canonical registry text
            (e.g. ``"world-pack-3f2a9c0d4e5b6a71"``).
        revision: Build date as ``YYYY-MM-DD``.
    """

    hash: str
    revision: str

    model_config = {"frozen": True}

    @field_validator("revision")
    @classmethod
    def _revision_is_iso_date(cls, value: str) -> str:
        date.fromisoformat(value)
        return value

    def to_json(self, *, indent: int = 2) -> str:
        """Serialise to a JSON string (``hash`` first, then ``revision``)."""
        return self.model_dump_json(indent=indent)

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict."""
        return self.model_dump()  # type: ignore[return-value]
