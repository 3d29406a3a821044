"""Content versioning activity: hash the serialized registry.

The hash is taken over a canonical text form of the place list: a JSON
array of ``Place.to_dict()`` objects in declared field order, 2-space
indentation, ``", "``/``": "`` separators, non-ASCII characters left
unescaped, encoded as UTF-8, no trailing newline. The registry file on
disk is that same text plus one newline, so consumers can re-derive the
hash from the file they load.
"""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, date, datetime

from world_places.core.constants import (
    CANONICAL_JSON_INDENT,
    DEFAULT_HASH_LENGTH,
    DEFAULT_HASH_PREFIX,
)
from world_places.models.place import Place
from world_places.models.version import VersionMeta


def canonical_json(places: list[Place]) -> str:
    """Serialise places to the canonical registry text."""
    return json.dumps(
        [place.to_dict() for place in places],
        indent=CANONICAL_JSON_INDENT,
        ensure_ascii=False,
    )


def content_hash(
    content: str,
    *,
    prefix: str = DEFAULT_HASH_PREFIX,
    length: int = DEFAULT_HASH_LENGTH,
) -> str:
    """Return ``prefix`` + the first ``length`` hex chars of SHA-256(content)."""
    digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return f"{prefix}{digest[:length]}"


def compute_version(
    places: list[Place],
    *,
    prefix: str = DEFAULT_HASH_PREFIX,
    length: int = DEFAULT_HASH_LENGTH,
    today: date | None = None,
) -> VersionMeta:
    """Compute the version stamp of a fully assembled registry.

    Args:
        places: Final place list, in registry order.
        prefix: Hash token prefix.
        length: Number of digest characters kept.
        today: Revision date. Defaults to the current UTC date.
    """
    revision = today or datetime.now(UTC).date()
    return VersionMeta(
        hash=content_hash(canonical_json(places), prefix=prefix, length=length),
        revision=revision.isoformat(),
    )
