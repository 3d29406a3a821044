"""Place build orchestrator.

Runs the four activities as a single-pass batch. Each phase returns a
typed result contract; the phases run strictly in sequence and any
exception aborts the whole build before anything is written.

Phases
------
1. **Extraction**: decode features (place-agnostic) and the border mesh.
2. **Registry**: build places, aliases and the version stamp.
3. **Annotation**: re-package features with registry place codes and
   draw orders for rendering.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any, TypedDict

from world_places.activities.build_registry import build_place_meta, build_places
from world_places.activities.compute_version import canonical_json, compute_version
from world_places.activities.extract_topology import (
    build_borders,
    build_feature_collection,
    extract_features,
)
from world_places.activities.synthesize_aliases import aliases_to_dict, build_aliases
from world_places.core.catalog import load_catalog
from world_places.core.config import ConfigValidationError, validate_config
from world_places.core.exceptions import PipelineError
from world_places.utils.assets import (
    AssetPaths,
    build_asset_paths,
    read_json,
    write_gzip_json,
    write_json,
    write_text,
)

if TYPE_CHECKING:
    from world_places.core.catalog import PlaceCatalog
    from world_places.core.config import BuildConfig
    from world_places.models.feature import GeometryFeature
    from world_places.models.place import Place
    from world_places.models.version import VersionMeta

logger = logging.getLogger("world_places.orchestrators.place_pipeline")


# ---------------------------------------------------------------------------
# Phase result contracts
# ---------------------------------------------------------------------------


class ExtractionResult(TypedDict):
    """Output contract for the extraction phase."""

    features: list[GeometryFeature]
    feature_collection: dict[str, Any]
    borders: dict[str, Any]


class RegistryResult(TypedDict):
    """Output contract for the registry phase."""

    places: list[Place]
    aliases: dict[str, list[str]]
    place_master_json: str
    version: VersionMeta


class BuildResult(TypedDict):
    """Every artifact of one build."""

    countries: dict[str, Any]
    borders: dict[str, Any]
    places: list[Place]
    aliases: dict[str, list[str]]
    place_master_json: str
    version: VersionMeta


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------


def run_extraction_phase(
    topology: dict[str, Any],
    catalog: PlaceCatalog,
    *,
    object_name: str,
) -> ExtractionResult:
    """Decode features and borders from the topology."""
    features = extract_features(
        topology,
        object_name,
        special_feature_names=catalog.special_feature_names,
    )
    return ExtractionResult(
        features=features,
        feature_collection=build_feature_collection(features),
        borders=build_borders(topology, object_name),
    )


def run_registry_phase(
    feature_collection: dict[str, Any],
    catalog: PlaceCatalog,
    *,
    hash_prefix: str,
    hash_length: int,
    today: date | None = None,
) -> RegistryResult:
    """Places → aliases → version stamp over the serialized places."""
    places = build_places(feature_collection, catalog)
    aliases = aliases_to_dict(build_aliases(places, catalog))
    master_json = canonical_json(places)
    version = compute_version(places, prefix=hash_prefix, length=hash_length, today=today)
    return RegistryResult(
        places=places,
        aliases=aliases,
        place_master_json=master_json,
        version=version,
    )


def run_annotation_phase(
    features: list[GeometryFeature],
    places: list[Place],
) -> dict[str, Any]:
    """Stamp registry place codes and draw orders onto rendering features."""
    place_meta = build_place_meta(places)
    collection = build_feature_collection(features, place_meta)
    unmatched = sum(1 for f in features if f.id not in place_meta)
    logger.info(
        "Annotation completed | features=%d | unmatched=%d",
        len(features),
        unmatched,
    )
    return collection


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def run_pipeline(
    topology: dict[str, Any],
    catalog: PlaceCatalog,
    config: BuildConfig,
    *,
    today: date | None = None,
) -> BuildResult:
    """Run every phase over an in-memory topology. Nothing is written.

    Raises:
        PipelineError: Any activity failure; no partial result is returned.
    """
    started = time.perf_counter()

    extraction = run_extraction_phase(topology, catalog, object_name=config.object_name)
    registry = run_registry_phase(
        extraction["feature_collection"],
        catalog,
        hash_prefix=config.hash_prefix,
        hash_length=config.hash_length,
        today=today,
    )
    countries = run_annotation_phase(extraction["features"], registry["places"])

    logger.info(
        "Build completed | places=%d | features=%d | hash=%s | revision=%s | duration=%.2fs",
        len(registry["places"]),
        len(countries["features"]),
        registry["version"].hash,
        registry["version"].revision,
        time.perf_counter() - started,
    )
    return BuildResult(
        countries=countries,
        borders=extraction["borders"],
        places=registry["places"],
        aliases=registry["aliases"],
        place_master_json=registry["place_master_json"],
        version=registry["version"],
    )


def write_outputs(result: BuildResult, paths: AssetPaths) -> None:
    """Write every artifact of a completed build."""
    write_gzip_json(paths.countries, result["countries"])
    write_gzip_json(paths.borders, result["borders"])
    write_text(paths.place_master, result["place_master_json"])
    write_json(paths.place_aliases, result["aliases"])
    write_json(paths.place_meta, result["version"].to_dict())
    logger.info(
        "Outputs written | map=%s | places=%s",
        paths.countries.parent,
        paths.place_master.parent,
    )


def new_run_id() -> str:
    """Return a short random identifier for one build run."""
    return uuid.uuid4().hex[:12]


def build_from_config(
    config: BuildConfig,
    *,
    catalog: PlaceCatalog | None = None,
    today: date | None = None,
    write: bool = True,
    run_id: str | None = None,
) -> tuple[BuildResult, AssetPaths]:
    """Read the topology named by ``config``, build, and optionally write.

    Every error raised out of the build carries ``run_id`` (generated
    when not given), which also tags the start and failure log lines.

    Raises:
        ConfigValidationError: If ``config`` is invalid or has no topology path.
        AssetIOError: If the topology cannot be read or outputs cannot be written.
        PipelineError: Any other build failure.
    """
    run_id = run_id or new_run_id()
    logger.info("Build started | run_id=%s | topology=%s", run_id, config.topology_path)
    try:
        validate_config(config)
        if not config.topology_path:
            raise ConfigValidationError(
                "WORLD_PLACES_TOPOLOGY_PATH", config.topology_path, "must not be empty"
            )

        if catalog is None:
            catalog = load_catalog(config.catalog_path or None)

        topology = read_json(config.topology_path)
        result = run_pipeline(topology, catalog, config, today=today)
        paths = build_asset_paths(config.output_dir, config.resolution)
        if write:
            write_outputs(result, paths)
    except PipelineError as err:
        err.run_id = run_id
        logger.error(
            "Build failed | run_id=%s | stage=%s | code=%s | error=%s",
            run_id,
            err.stage,
            err.code,
            err.message,
        )
        raise
    return result, paths


def with_overrides(config: BuildConfig, **overrides: Any) -> BuildConfig:
    """Return ``config`` with non-``None`` overrides applied and validated."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    updated = replace(config, **changes)
    validate_config(updated)
    return updated
