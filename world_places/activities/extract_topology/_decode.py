"""Arc and geometry decoding for shared topologies.

Responsibilities:
- Decode (optionally quantized, delta-encoded) arcs to absolute positions
- Resolve signed arc references (``~i`` means arc ``i`` reversed)
- Join arcs into rings and assemble GeoJSON polygon geometries
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from world_places.activities.extract_topology._validation import TopologyError

Position = tuple[float, float]

# Geometry types decoded into features. A geometry without a type is null.
POLYGON_TYPES = frozenset({"Polygon", "MultiPolygon"})

# A closed ring needs at least 4 positions (3 distinct + closure).
MIN_RING_POSITIONS = 4


# ---------------------------------------------------------------------------
# Arcs
# ---------------------------------------------------------------------------


def decode_arcs(topology: dict[str, Any]) -> list[list[Position]]:
    """Decode every arc of the topology to absolute ``(x, y)`` positions.

    With a ``transform`` the stored positions are delta-encoded integers:
    each one is accumulated onto the previous, then scaled and translated.
    Without one they are already absolute.

    Raises:
        TopologyError: If an arc or position is malformed.
    """
    transform = topology.get("transform")
    decoded: list[list[Position]] = []

    for arc_index, arc in enumerate(topology["arcs"]):
        if not isinstance(arc, list):
            msg = f"Arc {arc_index} must be a list of positions"
            raise TopologyError(msg)

        points: list[Position] = []
        x = y = 0.0
        for position in arc:
            if not isinstance(position, list | tuple) or len(position) < 2:
                msg = f"Malformed position {position!r} in arc {arc_index}"
                raise TopologyError(msg)
            if transform is None:
                points.append((position[0], position[1]))
                continue
            x += position[0]
            y += position[1]
            points.append(
                (
                    x * transform["scale"][0] + transform["translate"][0],
                    y * transform["scale"][1] + transform["translate"][1],
                )
            )
        decoded.append(points)

    return decoded


def arc_key(arc_index: int) -> int:
    """Map a signed arc reference to the index of the stored arc."""
    return ~arc_index if arc_index < 0 else arc_index


def resolve_arc(arc_index: int, arcs: list[list[Position]]) -> list[Position]:
    """Return the positions of a signed arc reference, reversed if negative.

    Raises:
        TopologyError: If the reference is not an int or is out of range.
    """
    if isinstance(arc_index, bool) or not isinstance(arc_index, int):
        msg = f"Arc reference must be an integer, got {arc_index!r}"
        raise TopologyError(msg)
    key = arc_key(arc_index)
    if key >= len(arcs):
        msg = f"Arc reference {arc_index} out of range (topology has {len(arcs)} arcs)"
        raise TopologyError(msg)
    points = arcs[key]
    return points[::-1] if arc_index < 0 else points


# ---------------------------------------------------------------------------
# Rings and polygons
# ---------------------------------------------------------------------------


def build_ring(arc_indexes: list[int], arcs: list[list[Position]]) -> list[list[float]]:
    """Join the referenced arcs into one closed ring.

    Consecutive arcs share an endpoint, so the first position of every arc
    after the first is dropped. Short rings are padded with their first
    position.
    """
    points: list[Position] = []
    for arc_index in arc_indexes:
        arc_points = resolve_arc(arc_index, arcs)
        points.extend(arc_points[1:] if points else arc_points)

    while points and len(points) < MIN_RING_POSITIONS:
        points.append(points[0])

    return [[p[0], p[1]] for p in points]


def decode_geometry(
    geometry: dict[str, Any], arcs: list[list[Position]]
) -> dict[str, Any] | None:
    """Decode a topology ``Polygon``/``MultiPolygon`` into GeoJSON.

    Returns ``None`` for a null geometry (no ``type``).

    Raises:
        TopologyError: If the geometry type is unsupported or its arcs
            are malformed.
    """
    geometry_type = geometry.get("type")
    if geometry_type is None:
        return None

    raw_arcs = geometry.get("arcs")
    if geometry_type == "Polygon":
        rings = _as_nested_list(raw_arcs, depth=2, geometry_type="Polygon")
        return {"type": "Polygon", "coordinates": [build_ring(r, arcs) for r in rings]}

    if geometry_type == "MultiPolygon":
        polygons = _as_nested_list(raw_arcs, depth=3, geometry_type="MultiPolygon")
        return {
            "type": "MultiPolygon",
            "coordinates": [[build_ring(r, arcs) for r in polygon] for polygon in polygons],
        }

    msg = f"Unsupported geometry type {geometry_type!r}"
    raise TopologyError(msg)


def iter_arc_references(geometry: dict[str, Any]) -> Iterator[int]:
    """Yield every signed arc reference used by a polygon geometry's rings."""
    geometry_type = geometry.get("type")
    raw_arcs = geometry.get("arcs")
    if geometry_type == "Polygon":
        for ring in _as_nested_list(raw_arcs, depth=2, geometry_type="Polygon"):
            yield from ring
    elif geometry_type == "MultiPolygon":
        for polygon in _as_nested_list(raw_arcs, depth=3, geometry_type="MultiPolygon"):
            for ring in polygon:
                yield from ring


def _as_nested_list(value: object, *, depth: int, geometry_type: str) -> list[Any]:
    """Check that ``value`` is a list nested ``depth`` levels deep."""

    def check(item: object, level: int) -> bool:
        if level == 0:
            return True
        return isinstance(item, list) and all(check(i, level - 1) for i in item)

    if not check(value, depth):
        msg = f"{geometry_type} arcs must be a list nested {depth} levels deep"
        raise TopologyError(msg)
    return value  # type: ignore[return-value]
