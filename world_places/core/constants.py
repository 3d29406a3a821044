"""Shared build constants: single source of truth.

Centralises draw-order bands, the content-hash format, and the names of
the emitted asset files so the activities, the orchestrator and the CLI
never repeat string or numeric literals.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Topology defaults
# ---------------------------------------------------------------------------

DEFAULT_OBJECT_NAME: str = "countries"
"""Name of the geometry collection inside the topology's ``objects``."""

DEFAULT_RESOLUTION: str = "50m"
"""Dataset resolution label used in rendering asset filenames."""

BORDERS_FEATURE_ID: str = "world-borders"
BORDERS_KIND: str = "borders"

# ---------------------------------------------------------------------------
# Place ordering
# ---------------------------------------------------------------------------

SORT_ORDER_STEP: int = 10
"""Gap between consecutive ``sort_order`` values (room for manual inserts)."""

DRAW_ORDER_BANDS: dict[str, int] = {
    "sovereign": 1_000_000,
    "territory": 2_000_000,
    "special": 3_000_000,
}
"""Base ``draw_order`` per place type. Bands must stay disjoint."""

DRAW_ORDER_BAND_WIDTH: int = 1_000_000

NUMERIC_CODE_WIDTH: int = 3
"""ISO 3166-1 numeric codes are zero-padded to this width."""

# ---------------------------------------------------------------------------
# Content versioning
# ---------------------------------------------------------------------------

DEFAULT_HASH_PREFIX: str = "world-pack-"
DEFAULT_HASH_LENGTH: int = 16
MAX_HASH_LENGTH: int = 64
"""Length of a hex SHA-256 digest."""

CANONICAL_JSON_INDENT: int = 2

# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT_DIR: str = "assets"
MAP_DIR: str = "map"
PLACES_DIR: str = "places"

PLACE_MASTER_FILENAME: str = "place_master.json"
PLACE_ALIASES_FILENAME: str = "place_aliases.json"
PLACE_META_FILENAME: str = "place_master_meta.json"
