"""Tests for the extract_topology activity.

Covers:
- Arc decoding (absolute and quantized delta-encoded)
- Signed arc references and ring assembly
- Identifier resolution (native id, special-name substitution, drop)
- Rendering feature collection with and without place metadata
- Border mesh: shared edges only, outer boundary excluded
- Malformed topology rejection
"""

from __future__ import annotations

import logging
from typing import Any

import pytest
from shapely.geometry import MultiLineString, shape

from world_places.activities.extract_topology import (
    TopologyError,
    build_borders,
    build_feature_collection,
    collect_arc_users,
    decode_arcs,
    decode_geometry,
    extract_features,
    mesh,
    resolve_geometry_id,
)
from world_places.models.feature import GeometryFeature, PlaceMeta

SPECIALS = {"Kosovo": "XK"}


class TestDecodeArcs:
    """Arc decoding."""

    def test_absolute_arcs_unchanged(self, triangle_topology: dict[str, Any]) -> None:
        arcs = decode_arcs(triangle_topology)
        assert arcs[0] == [(0, 0), (4, 0)]
        assert arcs[3] == [(4, 0), (2, 1)]

    def test_quantized_arcs_accumulate_and_transform(
        self, quantized_topology: dict[str, Any]
    ) -> None:
        arcs = decode_arcs(quantized_topology)
        assert arcs[0] == [
            (100.0, -10.0),
            (101.0, -10.0),
            (101.0, -9.0),
            (100.0, -9.0),
            (100.0, -10.0),
        ]
        assert arcs[1][0] == (102.0, -10.0)

    def test_malformed_position_raises(self, triangle_topology: dict[str, Any]) -> None:
        triangle_topology["arcs"][0] = [[0], [4, 0]]
        with pytest.raises(TopologyError, match="Malformed position"):
            decode_arcs(triangle_topology)


class TestDecodeGeometry:
    """Ring and polygon assembly."""

    def test_ring_joins_arcs_without_duplicate_vertices(
        self, triangle_topology: dict[str, Any]
    ) -> None:
        arcs = decode_arcs(triangle_topology)
        geometry = decode_geometry({"type": "Polygon", "arcs": [[0, 3, 4]]}, arcs)
        assert geometry == {
            "type": "Polygon",
            "coordinates": [[[0, 0], [4, 0], [2, 1], [0, 0]]],
        }

    def test_negative_reference_reverses_arc(self, triangle_topology: dict[str, Any]) -> None:
        arcs = decode_arcs(triangle_topology)
        geometry = decode_geometry({"type": "Polygon", "arcs": [[1, 5, -4]]}, arcs)
        ring = geometry["coordinates"][0]
        assert ring == [[4, 0], [2, 4], [2, 1], [4, 0]]

    def test_multipolygon(self, quantized_topology: dict[str, Any]) -> None:
        arcs = decode_arcs(quantized_topology)
        geometry = decode_geometry({"type": "MultiPolygon", "arcs": [[[0]], [[1]]]}, arcs)
        assert geometry["type"] == "MultiPolygon"
        assert len(geometry["coordinates"]) == 2
        assert shape(geometry).area == pytest.approx(2.0)

    def test_null_geometry(self, triangle_topology: dict[str, Any]) -> None:
        arcs = decode_arcs(triangle_topology)
        assert decode_geometry({"type": None}, arcs) is None

    def test_out_of_range_reference_raises(self, triangle_topology: dict[str, Any]) -> None:
        arcs = decode_arcs(triangle_topology)
        with pytest.raises(TopologyError, match="out of range"):
            decode_geometry({"type": "Polygon", "arcs": [[42]]}, arcs)

    def test_short_ring_is_padded(self) -> None:
        arcs = [[(0, 0), (1, 1)]]
        geometry = decode_geometry({"type": "Polygon", "arcs": [[0]]}, arcs)
        assert geometry["coordinates"][0] == [[0, 0], [1, 1], [0, 0], [0, 0]]


class TestResolveGeometryId:
    """Single point of identifier resolution."""

    def test_native_id_wins(self) -> None:
        assert resolve_geometry_id("036", "Kosovo", SPECIALS) == "036"

    def test_numeric_id_stringified(self) -> None:
        assert resolve_geometry_id(36, None, SPECIALS) == "36"

    def test_special_name_substitutes(self) -> None:
        assert resolve_geometry_id(None, "Kosovo", SPECIALS) == "XK"

    def test_empty_id_treated_as_missing(self) -> None:
        assert resolve_geometry_id("", "Kosovo", SPECIALS) == "XK"

    def test_unknown_name_unresolved(self) -> None:
        assert resolve_geometry_id(None, "Somaliland", SPECIALS) is None


class TestExtractFeatures:
    """End-to-end feature extraction."""

    def test_scenario_036_and_kosovo(self, quantized_topology: dict[str, Any]) -> None:
        features = extract_features(quantized_topology, special_feature_names=SPECIALS)
        assert [f.id for f in features] == ["036", "XK"]
        assert features[0].name == "Australia"
        assert features[1].geometry_type == "Polygon"

    def test_unresolvable_feature_dropped_with_warning(
        self, quantized_topology: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            features = extract_features(quantized_topology)
        assert [f.id for f in features] == ["036"]
        assert "Feature skipped | reason=no_id | name=Kosovo" in caplog.text

    def test_non_polygon_geometry_dropped(
        self, quantized_topology: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        geometries = quantized_topology["objects"]["countries"]["geometries"]
        geometries.append({"type": "Point", "id": "999", "coordinates": [0, 0]})
        with caplog.at_level(logging.INFO):
            features = extract_features(quantized_topology, special_feature_names=SPECIALS)
        assert "999" not in [f.id for f in features]
        assert "Feature skipped | reason=non_polygon | index=2 | type=Point" in caplog.text
        assert "Features extracted | features=2 | object=countries | geometries=3" in caplog.text

    def test_missing_object_raises(self, quantized_topology: dict[str, Any]) -> None:
        with pytest.raises(TopologyError, match="no object named 'land'"):
            extract_features(quantized_topology, "land")

    def test_not_a_topology_raises(self) -> None:
        with pytest.raises(TopologyError):
            extract_features({"type": "FeatureCollection", "features": []})

    def test_missing_arcs_raises(self, quantized_topology: dict[str, Any]) -> None:
        del quantized_topology["arcs"]
        with pytest.raises(TopologyError, match="arcs"):
            extract_features(quantized_topology)

    def test_bad_transform_raises(self, quantized_topology: dict[str, Any]) -> None:
        quantized_topology["transform"] = {"scale": [1], "translate": [0, 0]}
        with pytest.raises(TopologyError, match="scale"):
            extract_features(quantized_topology)


class TestBuildFeatureCollection:
    """Rendering feature collection."""

    def test_place_agnostic_defaults(self) -> None:
        fc = build_feature_collection([GeometryFeature(id="036", name="Australia")])
        assert fc["type"] == "FeatureCollection"
        feat = fc["features"][0]
        assert feat["id"] == "036"
        assert feat["properties"] == {"name": "Australia", "place_code": None, "draw_order": 0}

    def test_annotated_with_place_meta(self) -> None:
        features = [GeometryFeature(id="036", name="Australia"), GeometryFeature(id="999")]
        fc = build_feature_collection(
            features, {"036": PlaceMeta(place_code="AU", draw_order=1_000_010)}
        )
        assert fc["features"][0]["properties"]["place_code"] == "AU"
        assert fc["features"][0]["properties"]["draw_order"] == 1_000_010
        assert fc["features"][1]["properties"]["place_code"] is None


class TestBorders:
    """Border mesh over shared arcs."""

    def test_three_adjacent_regions_yield_shared_edges_only(
        self, triangle_topology: dict[str, Any]
    ) -> None:
        fc = build_borders(triangle_topology)
        assert len(fc["features"]) == 1
        border = fc["features"][0]
        assert border["properties"] == {"kind": "borders"}
        assert border["geometry"]["type"] == "MultiLineString"

        expected = MultiLineString([[(4, 0), (2, 1)], [(2, 1), (0, 0)], [(2, 4), (2, 1)]])
        assert shape(border["geometry"]).equals(expected)

    def test_outer_boundary_excluded(self, triangle_topology: dict[str, Any]) -> None:
        borders = shape(build_borders(triangle_topology)["features"][0]["geometry"])
        assert borders.length == pytest.approx(
            MultiLineString([[(4, 0), (2, 1)], [(2, 1), (0, 0)], [(2, 4), (2, 1)]]).length
        )

    def test_disjoint_regions_have_no_borders(self, quantized_topology: dict[str, Any]) -> None:
        fc = build_borders(quantized_topology)
        assert fc["features"][0]["geometry"]["coordinates"] == []

    def test_mesh_without_predicate_keeps_every_arc(
        self, triangle_topology: dict[str, Any]
    ) -> None:
        everything = mesh(triangle_topology)
        assert everything.length == pytest.approx(
            sum(
                shape({"type": "LineString", "coordinates": arc}).length
                for arc in triangle_topology["arcs"]
            )
        )

    def test_arc_users(self, triangle_topology: dict[str, Any]) -> None:
        geometries = triangle_topology["objects"]["countries"]["geometries"]
        users = collect_arc_users(geometries)
        assert users[0] == [0]
        assert users[3] == [0, 1]
        assert users[4] == [0, 2]
        assert users[5] == [1, 2]
