"""Deterministic asset paths and JSON asset I/O.

Output layout under the output root:

    map/countries_{resolution}.geojson.gz
    map/borders_{resolution}.geojson.gz
    places/place_master.json
    places/place_aliases.json
    places/place_master_meta.json

Writes are idempotent: the same data always produces the same bytes
(gzip members are written with a zero mtime) and existing files are
overwritten.
"""

from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from world_places.core.constants import (
    MAP_DIR,
    PLACE_ALIASES_FILENAME,
    PLACE_MASTER_FILENAME,
    PLACE_META_FILENAME,
    PLACES_DIR,
)
from world_places.core.exceptions import ResourceError

logger = logging.getLogger("world_places.utils.assets")

GZIP_SUFFIX = ".gz"


class AssetIOError(ResourceError):
    """Raised when an input asset cannot be read or an output cannot be written."""

    default_stage = "assets"
    default_code = "ASSET_IO_FAILED"


@dataclass(frozen=True, slots=True)
class AssetPaths:
    """Filesystem locations of every build artifact."""

    countries: Path
    borders: Path
    place_master: Path
    place_aliases: Path
    place_meta: Path


def build_asset_paths(output_dir: Path | str, resolution: str) -> AssetPaths:
    """Resolve artifact paths under ``output_dir`` for a dataset resolution."""
    root = Path(output_dir)
    map_dir = root / MAP_DIR
    places_dir = root / PLACES_DIR
    return AssetPaths(
        countries=map_dir / f"countries_{resolution}.geojson{GZIP_SUFFIX}",
        borders=map_dir / f"borders_{resolution}.geojson{GZIP_SUFFIX}",
        place_master=places_dir / PLACE_MASTER_FILENAME,
        place_aliases=places_dir / PLACE_ALIASES_FILENAME,
        place_meta=places_dir / PLACE_META_FILENAME,
    )


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_json(path: Path | str) -> Any:
    """Read a JSON document, transparently gunzipping ``.gz`` files.

    Raises:
        AssetIOError: If the file is missing, unreadable, or not JSON.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
        if path.suffix == GZIP_SUFFIX:
            raw = gzip.decompress(raw)
        return json.loads(raw.decode("utf-8"))
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise AssetIOError(msg) from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise AssetIOError(msg) from exc


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_text(path: Path, text: str) -> None:
    """Write UTF-8 text with a trailing newline, creating parent directories.

    Raises:
        AssetIOError: If the file cannot be written.
    """
    _write_bytes(path, f"{text}\n".encode())


def write_json(path: Path, data: Any, *, indent: int = 2) -> None:
    """Write pretty-printed JSON (non-ASCII unescaped) plus a newline."""
    write_text(path, json.dumps(data, indent=indent, ensure_ascii=False))


def write_gzip_json(path: Path, data: Any) -> None:
    """Write compact JSON as a reproducible gzip member."""
    payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    _write_bytes(path, gzip.compress(payload, mtime=0))


def _write_bytes(path: Path, content: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as exc:
        msg = f"Cannot write {path}: {exc}"
        raise AssetIOError(msg) from exc
    logger.debug("Asset written | path=%s | bytes=%d", path, len(content))
