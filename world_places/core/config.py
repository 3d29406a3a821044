"""Build configuration loaded from environment variables.

Every value has a default so a bare ``BuildConfig()`` describes the
standard build. ``from_env()`` reads ``WORLD_PLACES_*`` overrides and
validates them fail-fast, raising ``ConfigValidationError`` before any
topology is read.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from world_places.core.constants import (
    DEFAULT_HASH_LENGTH,
    DEFAULT_HASH_PREFIX,
    DEFAULT_OBJECT_NAME,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RESOLUTION,
    MAX_HASH_LENGTH,
)
from world_places.core.exceptions import ValidationError


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Immutable build configuration.

    Attributes:
        topology_path: Path to the TopoJSON source (plain or ``.gz``).
            Empty means it must be supplied by the caller.
        object_name: Name of the geometry collection under ``objects``.
        output_dir: Root directory that receives ``map/`` and ``places/``.
        resolution: Resolution label used in rendering asset filenames.
        catalog_path: Curated catalog YAML. Empty selects the packaged one.
        hash_prefix: Prefix of the content hash token.
        hash_length: Number of hex digest characters kept in the token.
    """

    topology_path: str = ""
    object_name: str = DEFAULT_OBJECT_NAME
    output_dir: str = DEFAULT_OUTPUT_DIR
    resolution: str = DEFAULT_RESOLUTION
    catalog_path: str = ""
    hash_prefix: str = DEFAULT_HASH_PREFIX
    hash_length: int = DEFAULT_HASH_LENGTH

    @classmethod
    def from_env(cls) -> BuildConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, not an
                integer where one is expected, or a required string is empty.
        """
        raw_hash_length = os.getenv("WORLD_PLACES_HASH_LENGTH", str(DEFAULT_HASH_LENGTH))
        try:
            hash_length = int(raw_hash_length)
        except ValueError as exc:
            raise ConfigValidationError(
                "WORLD_PLACES_HASH_LENGTH", raw_hash_length, "must be an integer"
            ) from exc

        config = cls(
            topology_path=os.getenv("WORLD_PLACES_TOPOLOGY_PATH", ""),
            object_name=os.getenv("WORLD_PLACES_OBJECT_NAME", DEFAULT_OBJECT_NAME),
            output_dir=os.getenv("WORLD_PLACES_OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
            resolution=os.getenv("WORLD_PLACES_RESOLUTION", DEFAULT_RESOLUTION),
            catalog_path=os.getenv("WORLD_PLACES_CATALOG_PATH", ""),
            hash_prefix=os.getenv("WORLD_PLACES_HASH_PREFIX", DEFAULT_HASH_PREFIX),
            hash_length=hash_length,
        )
        validate_config(config)
        return config


def validate_config(config: BuildConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not 1 <= config.hash_length <= MAX_HASH_LENGTH:
        raise ConfigValidationError(
            "WORLD_PLACES_HASH_LENGTH",
            config.hash_length,
            f"must be between 1 and {MAX_HASH_LENGTH} (hex characters)",
        )

    if not config.object_name:
        raise ConfigValidationError(
            "WORLD_PLACES_OBJECT_NAME",
            config.object_name,
            "must not be empty",
        )

    if not config.resolution:
        raise ConfigValidationError(
            "WORLD_PLACES_RESOLUTION",
            config.resolution,
            "must not be empty",
        )

    if not config.output_dir:
        raise ConfigValidationError(
            "WORLD_PLACES_OUTPUT_DIR",
            config.output_dir,
            "must not be empty",
        )
