"""Border mesh construction.

Because a shared topology stores every boundary once, the arcs that two
different polygons both reference are exactly the internal borders. The
mesh keeps those arcs (or whichever arcs a predicate accepts) and
stitches them into maximal lines with shapely.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from world_places.activities.extract_topology._decode import (
    POLYGON_TYPES,
    Position,
    arc_key,
    iter_arc_references,
    resolve_arc,
)

logger = logging.getLogger("world_places.activities.extract_topology")

#: Receives the collection indexes of the first and last geometry using an arc.
ArcPredicate = Callable[[int, int], bool]


def distinct_neighbours(first: int, last: int) -> bool:
    """Keep an arc only when it separates two different geometries."""
    return first != last


def collect_arc_users(geometries: list[dict[str, Any]]) -> dict[int, list[int]]:
    """Map each stored arc index to the geometries whose rings use it.

    Geometry indexes are appended in collection order, once per use.
    """
    users: dict[int, list[int]] = {}
    for geometry_index, geometry in enumerate(geometries):
        if geometry.get("type") not in POLYGON_TYPES:
            continue
        for reference in iter_arc_references(geometry):
            users.setdefault(arc_key(reference), []).append(geometry_index)
    return users


def mesh_geometry(
    geometries: list[dict[str, Any]],
    arcs: list[list[Position]],
    predicate: ArcPredicate | None = None,
):
    """Build a shapely ``MultiLineString`` from the arcs the predicate keeps.

    Args:
        geometries: Topology geometries of one collection.
        arcs: Decoded arcs of the topology.
        predicate: Called with the first and last user of each arc. ``None``
            keeps every referenced arc.

    Returns:
        A ``MultiLineString``, empty when no arc qualifies.
    """
    from shapely.geometry import LineString, MultiLineString
    from shapely.ops import linemerge

    users = collect_arc_users(geometries)
    kept = sorted(
        key
        for key, owners in users.items()
        if predicate is None or predicate(owners[0], owners[-1])
    )

    lines = [LineString(resolve_arc(key, arcs)) for key in kept if len(arcs[key]) >= 2]
    logger.debug("Mesh arcs | referenced=%d | kept=%d", len(users), len(lines))
    if not lines:
        return MultiLineString()

    merged = linemerge(lines)
    if merged.geom_type == "LineString":
        return MultiLineString([merged])
    if merged.geom_type == "MultiLineString":
        return merged
    return MultiLineString()
