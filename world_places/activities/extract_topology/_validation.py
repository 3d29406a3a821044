"""Structural validation of TopoJSON documents.

Responsibilities:
- Topology envelope checks (type, arcs, objects)
- Named geometry-collection lookup
- Quantization transform shape
"""

from __future__ import annotations

from typing import Any

from world_places.core.exceptions import ValidationError


class TopologyError(ValidationError):
    """Raised when a topology document is malformed."""

    default_stage = "extract_topology"
    default_code = "TOPOLOGY_INVALID"


def validate_topology(topology: object, object_name: str) -> list[dict[str, Any]]:
    """Validate the topology envelope and return the named geometries.

    Raises:
        TopologyError: If the document is not a ``Topology``, lacks a list
            of arcs, or has no geometry collection called ``object_name``.
    """
    if not isinstance(topology, dict):
        msg = f"Topology must be a JSON object, got {type(topology).__name__}"
        raise TopologyError(msg)

    if topology.get("type") != "Topology":
        msg = f"Expected type 'Topology', got {topology.get('type')!r}"
        raise TopologyError(msg)

    if not isinstance(topology.get("arcs"), list):
        msg = "Topology has no 'arcs' list"
        raise TopologyError(msg)

    validate_transform(topology.get("transform"))

    objects = topology.get("objects")
    if not isinstance(objects, dict) or object_name not in objects:
        available = sorted(objects) if isinstance(objects, dict) else []
        msg = f"Topology has no object named '{object_name}' (available: {available})"
        raise TopologyError(msg)

    collection = objects[object_name]
    if not isinstance(collection, dict) or collection.get("type") != "GeometryCollection":
        msg = f"Object '{object_name}' is not a GeometryCollection"
        raise TopologyError(msg)

    geometries = collection.get("geometries")
    if not isinstance(geometries, list):
        msg = f"Object '{object_name}' has no 'geometries' list"
        raise TopologyError(msg)

    for idx, geometry in enumerate(geometries):
        if not isinstance(geometry, dict):
            msg = (
                f"Geometry {idx} of '{object_name}' must be a JSON object, "
                f"got {type(geometry).__name__}"
            )
            raise TopologyError(msg)

    return geometries


def validate_transform(transform: object) -> None:
    """Check that a quantization transform has numeric scale/translate pairs.

    ``None`` (an unquantized topology) is accepted.

    Raises:
        TopologyError: If the transform is present but malformed.
    """
    if transform is None:
        return
    if not isinstance(transform, dict):
        msg = f"Topology transform must be an object, got {type(transform).__name__}"
        raise TopologyError(msg)
    for key in ("scale", "translate"):
        value = transform.get(key)
        if (
            not isinstance(value, list)
            or len(value) != 2
            or not all(isinstance(v, int | float) and not isinstance(v, bool) for v in value)
        ):
            msg = f"Topology transform '{key}' must be two numbers, got {value!r}"
            raise TopologyError(msg)
