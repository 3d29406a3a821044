"""Data model for a decoded topology feature.

A GeometryFeature is one polygon or multipolygon pulled out of the shared
topology, with its identifier already resolved. It is the output of the
``extract_topology`` activity and the unit of the rendering feature
collection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PlaceMeta:
    """Registry values stamped onto a rendering feature."""

    place_code: str
    draw_order: int


@dataclass(frozen=True, slots=True)
class GeometryFeature:
    """A single feature extracted from a topology.

    Attributes:
        id: Resolved geometry identifier (native numeric id such as
            ``"036"`` or a reserved substitute such as ``"XK"``).
        name: Value of the source ``name`` property, if any.
        geometry: GeoJSON ``Polygon``/``MultiPolygon`` mapping, or ``None``
            when the source geometry is null.
    """

    id: str
    name: str | None = None
    geometry: dict[str, Any] | None = None

    def to_geojson(self, meta: PlaceMeta | None = None) -> dict[str, Any]:
        """Serialise as a GeoJSON ``Feature`` for the rendering collection.

        Without ``meta`` the place fields are placeholders (``place_code``
        is ``None`` and ``draw_order`` is ``0``).
        """
        return {
            "type": "Feature",
            "id": self.id,
            "properties": {
                "name": self.name,
                "place_code": meta.place_code if meta else None,
                "draw_order": meta.draw_order if meta else 0,
            },
            "geometry": self.geometry,
        }

    @property
    def geometry_type(self) -> str | None:
        """GeoJSON type of the geometry, or ``None`` for null geometry."""
        if self.geometry is None:
            return None
        return str(self.geometry.get("type"))
