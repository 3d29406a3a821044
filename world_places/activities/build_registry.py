"""Place registry activity: derive the ordered place list.

Maps each extracted feature to a canonical place code, classifies it,
assigns deterministic ordering, and appends the curated manual places.

Rules:
- Geometry ids resolve through the catalog overrides first, then the
  ISO 3166-1 numeric table (ids zero-padded to three digits).
  Unresolvable ids are skipped without a warning; some topology entries
  are expected not to map.
- The first feature seen for a code wins; later duplicates are dropped.
- Codes in the contested set are ``territory``, all others ``sovereign``.
- Derived codes are sorted lexicographically and numbered
  ``sort_order = (index + 1) * 10``; ``draw_order`` adds the type band.
- Manual places continue the ``sort_order`` sequence in catalog order
  and draw in the band of their own type (``special`` by default).

A malformed feature collection aborts the build; no partial registry is
ever returned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pycountry

from world_places.core.catalog import PlaceCatalog
from world_places.core.constants import NUMERIC_CODE_WIDTH, SORT_ORDER_STEP
from world_places.core.exceptions import ContractError
from world_places.models.feature import PlaceMeta
from world_places.models.place import Place, PlaceType

logger = logging.getLogger("world_places.activities.build_registry")


class RegistryError(ContractError):
    """Raised when the registry cannot be built from its input."""

    default_stage = "build_registry"
    default_code = "REGISTRY_INPUT_INVALID"


def numeric_to_alpha2(
    geometry_id: str | None,
    overrides: Mapping[str, str] | None = None,
) -> str | None:
    """Resolve a geometry id to an upper-case alpha-2 code.

    Args:
        geometry_id: Numeric id such as ``"36"`` or ``"036"``, or a
            reserved id present in ``overrides``.
        overrides: Ids that map to fixed codes outside the ISO table.

    Returns:
        The alpha-2 code, or ``None`` if the id is empty or unknown.
    """
    if not geometry_id:
        return None
    if overrides and geometry_id in overrides:
        return overrides[geometry_id]

    padded = geometry_id.zfill(NUMERIC_CODE_WIDTH)
    country = pycountry.countries.get(numeric=padded)
    if country is None:
        return None
    return str(country.alpha_2).upper()


def classify(place_code: str, contested_codes: frozenset[str]) -> PlaceType:
    """Classify a derived place code."""
    return PlaceType.TERRITORY if place_code in contested_codes else PlaceType.SOVEREIGN


def build_places(collection: object, catalog: PlaceCatalog) -> list[Place]:
    """Build the ordered place registry from a feature collection.

    Args:
        collection: GeoJSON-style mapping with a ``features`` list, as
            produced by ``build_feature_collection``.
        catalog: Curated classification and manual-entry data.

    Returns:
        Derived places sorted by code, followed by the manual places.

    Raises:
        RegistryError: If the collection or any feature entry is not
            well-formed, or a manual code collides with a derived one.
    """
    features = _require_features(collection)

    # code -> (geometry_id, display name); first feature wins
    derived: dict[str, tuple[str, str]] = {}
    unresolved = 0
    for feature in features:
        raw_id = feature.get("id")
        geometry_id = None if raw_id is None else str(raw_id)
        code = numeric_to_alpha2(geometry_id, catalog.geometry_id_overrides)
        if code is None:
            unresolved += 1
            continue
        if code in derived:
            continue
        derived[code] = (geometry_id, _display_name(feature, code))  # type: ignore[assignment]

    places: list[Place] = []
    for index, code in enumerate(sorted(derived)):
        geometry_id, name = derived[code]
        place_type = classify(code, catalog.contested_codes)
        sort_order = (index + 1) * SORT_ORDER_STEP
        places.append(
            Place(
                place_code=code,
                type=place_type,
                name_en=name,
                name_ja=name,
                is_active=True,
                geometry_id=geometry_id,
                sort_order=sort_order,
                draw_order=place_type.band_base + sort_order,
            )
        )

    next_sort_order = (places[-1].sort_order if places else 0) + SORT_ORDER_STEP
    for manual in catalog.manual_places:
        if manual.place_code in derived:
            msg = f"Manual place {manual.place_code} collides with a derived place"
            raise RegistryError(msg)
        places.append(
            Place(
                place_code=manual.place_code,
                type=manual.type,
                name_en=manual.name_en,
                name_ja=manual.name_ja,
                is_active=manual.is_active,
                geometry_id=manual.geometry_id,
                sort_order=next_sort_order,
                draw_order=manual.type.band_base + next_sort_order,
            )
        )
        next_sort_order += SORT_ORDER_STEP

    logger.info(
        "Registry built | derived=%d | manual=%d | unresolved=%d",
        len(derived),
        len(catalog.manual_places),
        unresolved,
    )
    return places


def build_place_meta(places: list[Place]) -> dict[str, PlaceMeta]:
    """Index places by geometry id for annotating rendering features."""
    return {
        place.geometry_id: PlaceMeta(place_code=place.place_code, draw_order=place.draw_order)
        for place in places
        if place.geometry_id
    }


def places_from_master(entries: object) -> list[Place]:
    """Rebuild places from a parsed ``place_master.json``.

    Raises:
        RegistryError: If the document is not a list of valid place entries.
    """
    if not isinstance(entries, list):
        msg = f"Place master must be a JSON array, got {type(entries).__name__}"
        raise RegistryError(msg)

    places: list[Place] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            msg = f"Place master entry {index} must be a mapping, got {type(entry).__name__}"
            raise RegistryError(msg)
        try:
            places.append(Place.from_dict(dict(entry)))
        except (TypeError, ValueError) as exc:
            msg = f"Place master entry {index} is invalid: {exc}"
            raise RegistryError(msg) from exc
    return places


def _require_features(collection: object) -> list[dict[str, Any]]:
    if not isinstance(collection, Mapping):
        msg = f"Feature collection must be a mapping, got {type(collection).__name__}"
        raise RegistryError(msg)

    features = collection.get("features")
    if not isinstance(features, list):
        msg = "GeoJSON features are missing"
        raise RegistryError(msg)

    for index, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            msg = f"Feature {index} must be a mapping, got {type(feature).__name__}"
            raise RegistryError(msg)
    return features


def _display_name(feature: Mapping[str, Any], fallback: str) -> str:
    properties = feature.get("properties")
    name = properties.get("name") if isinstance(properties, Mapping) else None
    if name is None or not str(name).strip():
        return fallback
    return str(name).strip()
