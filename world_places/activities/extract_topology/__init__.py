"""Topology extraction activity: composable pipeline.

Turns a shared-topology (TopoJSON) document into standalone polygon
features and a dissolved border mesh.

The extraction pipeline is split into focused stages:
- **_validation**: topology envelope, named collection, transform shape
- **_decode**: arc decoding (quantized or absolute), ring/polygon assembly
- **_mesh**: shared-arc filtering and line stitching with shapely

Identifier resolution happens here, in ``resolve_geometry_id``, and
nowhere else: a feature keeps its native id, falls back to a reserved
code when its name is a known special case, and is otherwise dropped
with a warning.

The extractor is used twice per build: once to produce place-agnostic
features for the registry, and once more (via ``build_feature_collection``
with a ``PlaceMeta`` map) to annotate the rendering assets after the
registry exists.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from world_places.activities.extract_topology._decode import (
    POLYGON_TYPES,
    decode_arcs,
    decode_geometry,
)
from world_places.activities.extract_topology._mesh import (
    ArcPredicate,
    collect_arc_users,
    distinct_neighbours,
    mesh_geometry,
)
from world_places.activities.extract_topology._validation import (
    TopologyError,
    validate_topology,
)
from world_places.core.constants import BORDERS_FEATURE_ID, BORDERS_KIND, DEFAULT_OBJECT_NAME
from world_places.models.feature import GeometryFeature, PlaceMeta

logger = logging.getLogger("world_places.activities.extract_topology")

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "ArcPredicate",
    "TopologyError",
    "build_borders",
    "build_feature_collection",
    "collect_arc_users",
    "decode_arcs",
    "decode_geometry",
    "distinct_neighbours",
    "extract_features",
    "mesh",
    "resolve_geometry_id",
    "validate_topology",
]


def resolve_geometry_id(
    native_id: object,
    name: str | None,
    special_feature_names: Mapping[str, str],
) -> str | None:
    """Resolve the identifier of a topology feature.

    Returns the native id as a string; when it is missing or empty, the
    reserved code registered for ``name``; otherwise ``None``, meaning the
    feature cannot be identified and must be dropped.
    """
    if native_id is not None and str(native_id) != "":
        return str(native_id)
    if name is not None and name in special_feature_names:
        return special_feature_names[name]
    return None


def extract_features(
    topology: dict[str, Any],
    object_name: str = DEFAULT_OBJECT_NAME,
    *,
    special_feature_names: Mapping[str, str] | None = None,
) -> list[GeometryFeature]:
    """Decode the named collection into standalone polygon features.

    Features keep source order. Geometries that are neither polygonal nor
    null, and features whose identifier cannot be resolved, are skipped
    with a warning.

    Args:
        topology: Parsed TopoJSON document.
        object_name: Key of the geometry collection under ``objects``.
        special_feature_names: Feature name → reserved id for features
            that carry no id (e.g. ``{"Kosovo": "XK"}``).

    Raises:
        TopologyError: If the document or one of its geometries is malformed.
    """
    geometries = validate_topology(topology, object_name)
    arcs = decode_arcs(topology)
    specials = special_feature_names or {}

    features: list[GeometryFeature] = []
    for index, geometry in enumerate(geometries):
        properties = geometry.get("properties")
        raw_name = properties.get("name") if isinstance(properties, dict) else None
        name = None if raw_name is None else str(raw_name)

        geometry_type = geometry.get("type")
        if geometry_type is not None and geometry_type not in POLYGON_TYPES:
            logger.warning(
                "Feature skipped | reason=non_polygon | index=%d | type=%s | name=%s",
                index,
                geometry_type,
                name or "unknown",
            )
            continue

        geometry_id = resolve_geometry_id(geometry.get("id"), name, specials)
        if geometry_id is None:
            logger.warning("Feature skipped | reason=no_id | name=%s", name or "unknown")
            continue

        features.append(
            GeometryFeature(
                id=geometry_id,
                name=name,
                geometry=decode_geometry(geometry, arcs),
            )
        )

    logger.info(
        "Features extracted | features=%d | object=%s | geometries=%d",
        len(features),
        object_name,
        len(geometries),
    )
    return features


def build_feature_collection(
    features: list[GeometryFeature],
    place_meta: Mapping[str, PlaceMeta] | None = None,
) -> dict[str, Any]:
    """Package features as a GeoJSON ``FeatureCollection``.

    Args:
        features: Extracted features, in output order.
        place_meta: Geometry id → registry values. ``None`` (or a missing
            entry) leaves ``place_code`` null and ``draw_order`` at 0.
    """
    meta = place_meta or {}
    return {
        "type": "FeatureCollection",
        "features": [feature.to_geojson(meta.get(feature.id)) for feature in features],
    }


def mesh(
    topology: dict[str, Any],
    object_name: str = DEFAULT_OBJECT_NAME,
    predicate: ArcPredicate | None = None,
):
    """Return the shapely ``MultiLineString`` of arcs accepted by ``predicate``.

    Raises:
        TopologyError: If the document is malformed.
    """
    geometries = validate_topology(topology, object_name)
    arcs = decode_arcs(topology)
    return mesh_geometry(geometries, arcs, predicate)


def build_borders(
    topology: dict[str, Any],
    object_name: str = DEFAULT_OBJECT_NAME,
) -> dict[str, Any]:
    """Build the border ``FeatureCollection``: one multi-line feature of
    every arc shared by two different geometries.

    Raises:
        TopologyError: If the document is malformed.
    """
    borders = mesh(topology, object_name, distinct_neighbours)
    coordinates = [[list(point) for point in line.coords] for line in borders.geoms]
    logger.info("Built border mesh | lines=%d", len(coordinates))
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": BORDERS_FEATURE_ID,
                "properties": {"kind": BORDERS_KIND},
                "geometry": {"type": "MultiLineString", "coordinates": coordinates},
            }
        ],
    }
