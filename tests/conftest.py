"""Shared pytest fixtures for the world places test suite."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from world_places.core.catalog import PlaceCatalog, load_catalog

# ---------------------------------------------------------------------------
# Topology fixtures
# ---------------------------------------------------------------------------

# Triangle A(0,0) B(4,0) C(2,4) split at O(2,1) into three regions that
# touch each other pairwise:
#   R1 = A-B-O, R2 = B-C-O, R3 = C-A-O
# Arcs 0-2 are the outer boundary, arcs 3-5 the shared internal edges.
_TRIANGLE_TOPOLOGY: dict[str, Any] = {
    "type": "Topology",
    "arcs": [
        [[0, 0], [4, 0]],  # 0: A→B
        [[4, 0], [2, 4]],  # 1: B→C
        [[2, 4], [0, 0]],  # 2: C→A
        [[4, 0], [2, 1]],  # 3: B→O
        [[2, 1], [0, 0]],  # 4: O→A
        [[2, 4], [2, 1]],  # 5: C→O
    ],
    "objects": {
        "countries": {
            "type": "GeometryCollection",
            "geometries": [
                {
                    "type": "Polygon",
                    "id": "036",
                    "arcs": [[0, 3, 4]],
                    "properties": {"name": "Australia"},
                },
                {
                    "type": "Polygon",
                    "id": "554",
                    "arcs": [[1, 5, -4]],
                    "properties": {"name": "New Zealand"},
                },
                {
                    "type": "Polygon",
                    "arcs": [[2, -5, -6]],
                    "properties": {"name": "Kosovo"},
                },
            ],
        }
    },
}

# Two disjoint quantized squares: "036" and an id-less "Kosovo".
_QUANTIZED_TOPOLOGY: dict[str, Any] = {
    "type": "Topology",
    "transform": {"scale": [0.5, 0.5], "translate": [100, -10]},
    "arcs": [
        [[0, 0], [2, 0], [0, 2], [-2, 0], [0, -2]],
        [[4, 0], [2, 0], [0, 2], [-2, 0], [0, -2]],
    ],
    "objects": {
        "countries": {
            "type": "GeometryCollection",
            "geometries": [
                {
                    "type": "Polygon",
                    "id": "036",
                    "arcs": [[0]],
                    "properties": {"name": "Australia"},
                },
                {
                    "type": "Polygon",
                    "arcs": [[1]],
                    "properties": {"name": "Kosovo"},
                },
            ],
        }
    },
}


@pytest.fixture()
def triangle_topology() -> dict[str, Any]:
    """Three mutually adjacent regions sharing three internal arcs."""
    return copy.deepcopy(_TRIANGLE_TOPOLOGY)


@pytest.fixture()
def quantized_topology() -> dict[str, Any]:
    """Quantized topology with geometries ``036`` and id-less ``Kosovo``."""
    return copy.deepcopy(_QUANTIZED_TOPOLOGY)


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def catalog() -> PlaceCatalog:
    """The catalog shipped with the package."""
    return load_catalog()
