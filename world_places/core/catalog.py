"""Curated place catalog loaded from YAML.

The catalog holds everything the topology cannot say on its own: which
codes are contested territories, which geometry ids and feature names map
to reserved codes, the manual places appended after derived ones, and
extra alias spellings. It is read once per build and passed explicitly
to the activities.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from world_places.core.exceptions import ValidationError
from world_places.models.place import PlaceType

logger = logging.getLogger("world_places.core.catalog")

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "place_catalog.yaml"


class CatalogError(ValidationError):
    """Raised when the catalog file is unreadable or malformed."""

    default_stage = "catalog"
    default_code = "CATALOG_INVALID"


@dataclass(frozen=True, slots=True)
class ManualPlace:
    """Template of a curated place absent from the topology.

    ``sort_order`` and ``draw_order`` are assigned by the registry builder.
    """

    place_code: str
    type: PlaceType = PlaceType.SPECIAL
    name_en: str = ""
    name_ja: str = ""
    is_active: bool = False
    geometry_id: str | None = None


@dataclass(frozen=True, slots=True)
class PlaceCatalog:
    """Immutable curated configuration for a build.

    Attributes:
        contested_codes: Codes typed ``territory``.
        geometry_id_overrides: Geometry id → fixed alpha-2 code, consulted
            before the ISO numeric table.
        special_feature_names: Feature name → reserved id for features that
            carry no id in the topology.
        manual_places: Curated entries appended in this order.
        alias_extras: Place code → additional alias spellings.
    """

    contested_codes: frozenset[str] = frozenset()
    geometry_id_overrides: dict[str, str] = field(default_factory=dict)
    special_feature_names: dict[str, str] = field(default_factory=dict)
    manual_places: tuple[ManualPlace, ...] = ()
    alias_extras: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlaceCatalog:
        """Build a catalog from parsed YAML.

        Raises:
            CatalogError: If a section has the wrong shape.
        """
        contested = _as_list(data, "contested_codes")
        manual_raw = _as_list(data, "manual_places")

        manual: list[ManualPlace] = []
        for idx, entry in enumerate(manual_raw):
            if not isinstance(entry, dict) or not entry.get("place_code"):
                msg = f"manual_places[{idx}] must be a mapping with a place_code"
                raise CatalogError(msg)
            code = str(entry["place_code"])
            try:
                place_type = PlaceType(str(entry.get("type", PlaceType.SPECIAL.value)))
            except ValueError as exc:
                msg = f"manual_places[{idx}] has unknown type {entry.get('type')!r}"
                raise CatalogError(msg) from exc
            geometry_id = entry.get("geometry_id")
            manual.append(
                ManualPlace(
                    place_code=code,
                    type=place_type,
                    name_en=str(entry.get("name_en") or code),
                    name_ja=str(entry.get("name_ja") or entry.get("name_en") or code),
                    is_active=bool(entry.get("is_active", False)),
                    geometry_id=None if geometry_id is None else str(geometry_id),
                )
            )

        codes = [m.place_code for m in manual]
        if len(codes) != len(set(codes)):
            msg = f"manual_places contains duplicate place codes: {codes}"
            raise CatalogError(msg)

        extras_raw = _as_mapping(data, "alias_extras")
        extras: dict[str, tuple[str, ...]] = {}
        for code, values in extras_raw.items():
            if not isinstance(values, list):
                msg = f"alias_extras[{code}] must be a list, got {type(values).__name__}"
                raise CatalogError(msg)
            extras[str(code)] = tuple(str(v) for v in values if v is not None)

        return cls(
            contested_codes=frozenset(str(c) for c in contested),
            geometry_id_overrides={
                str(k): str(v) for k, v in _as_mapping(data, "geometry_id_overrides").items()
            },
            special_feature_names={
                str(k): str(v) for k, v in _as_mapping(data, "special_feature_names").items()
            },
            manual_places=tuple(manual),
            alias_extras=extras,
        )


def load_catalog(path: Path | str | None = None) -> PlaceCatalog:
    """Load and validate the curated catalog.

    Args:
        path: YAML file to read. ``None`` or ``""`` selects the catalog
            shipped with the package.

    Raises:
        CatalogError: If the file cannot be read or parsed, or is malformed.
    """
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
    try:
        raw = yaml.safe_load(catalog_path.read_text(encoding="utf-8"))
    except OSError as exc:
        msg = f"Cannot read catalog {catalog_path}: {exc}"
        raise CatalogError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"Catalog {catalog_path} is not valid YAML: {exc}"
        raise CatalogError(msg) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        msg = f"Catalog root must be a mapping, got {type(raw).__name__}"
        raise CatalogError(msg)

    catalog = PlaceCatalog.from_dict(raw)
    logger.debug(
        "Catalog loaded | path=%s | contested=%d | manual=%d",
        catalog_path,
        len(catalog.contested_codes),
        len(catalog.manual_places),
    )
    return catalog


def _as_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        msg = f"{key} must be a list, got {type(value).__name__}"
        raise CatalogError(msg)
    return value


def _as_mapping(data: dict[str, Any], key: str) -> dict[Any, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        msg = f"{key} must be a mapping, got {type(value).__name__}"
        raise CatalogError(msg)
    return value
