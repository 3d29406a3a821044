"""Data model for a registry place.

A Place is one canonical entry in the place registry: a sovereign
country, a contested territory, or a manually curated special entry.
Places are produced by the ``build_registry`` activity and are the
input of both alias synthesis and content versioning.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from world_places.core.constants import DRAW_ORDER_BAND_WIDTH, DRAW_ORDER_BANDS


class PlaceType(str, Enum):
    """Registry classification of a place."""

    SOVEREIGN = "sovereign"
    TERRITORY = "territory"
    SPECIAL = "special"

    @property
    def band_base(self) -> int:
        """Base ``draw_order`` of this type's band."""
        return DRAW_ORDER_BANDS[self.value]


@dataclass(frozen=True, slots=True)
class Place:
    """A single registry entry.

    Attributes:
        place_code: ISO 3166-1 alpha-2 code or a reserved code (``"XK"``,
            ``"XNC"``). Unique across the registry.
        type: Classification, which also selects the draw-order band.
        name_en: English display name.
        name_ja: Japanese display name.
        is_active: Whether the place is selectable by end users.
        geometry_id: Identifier of the rendering feature, if any.
        sort_order: List display order, strictly increasing in registry order.
        draw_order: Rendering stack order inside the type's band.
    """

    place_code: str
    type: PlaceType
    name_en: str
    name_ja: str
    is_active: bool = True
    geometry_id: str | None = None
    sort_order: int = 0
    draw_order: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serialise with the registry's stable field order."""
        return {
            "place_code": self.place_code,
            "type": self.type.value,
            "name_en": self.name_en,
            "name_ja": self.name_ja,
            "is_active": self.is_active,
            "geometry_id": self.geometry_id,
            "sort_order": self.sort_order,
            "draw_order": self.draw_order,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Place:
        """Deserialise a registry entry written by ``to_dict``.

        Raises:
            ValueError: If ``place_code`` is missing or ``type`` is unknown.
            TypeError: If an order field is not an integer.
        """
        place_code = str(data.get("place_code") or "")
        if not place_code:
            msg = "place_code is required"
            raise ValueError(msg)

        sort_order = data.get("sort_order", 0)
        draw_order = data.get("draw_order", 0)
        for key, value in (("sort_order", sort_order), ("draw_order", draw_order)):
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{key} must be an int, got {type(value).__name__}"
                raise TypeError(msg)

        geometry_id = data.get("geometry_id")
        return cls(
            place_code=place_code,
            type=PlaceType(str(data.get("type", ""))),
            name_en=str(data.get("name_en", place_code)),
            name_ja=str(data.get("name_ja", place_code)),
            is_active=bool(data.get("is_active", True)),
            geometry_id=None if geometry_id is None else str(geometry_id),
            sort_order=sort_order,  # type: ignore[arg-type]
            draw_order=draw_order,  # type: ignore[arg-type]
        )

    @property
    def in_draw_band(self) -> bool:
        """Whether ``draw_order`` lies inside the band of ``type``."""
        base = self.type.band_base
        return base <= self.draw_order < base + DRAW_ORDER_BAND_WIDTH
