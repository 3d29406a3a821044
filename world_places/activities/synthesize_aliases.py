"""Alias synthesis activity: lookup aliases per place.

Each place gets, in this order: its code, its trimmed English name, the
English name without parenthetical qualifiers (when that differs), and
the catalog's extra spellings. Aliases are case-sensitive, blank values
are dropped, and the first occurrence fixes an alias's position, since
consumers may treat position as priority.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from world_places.core.catalog import PlaceCatalog
from world_places.models.place import Place

logger = logging.getLogger("world_places.activities.synthesize_aliases")

_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)\s*")
_WHITESPACE_RE = re.compile(r"\s+")


class AliasSet:
    """Ordered, deduplicated aliases of one place (list plus index)."""

    __slots__ = ("_aliases", "_seen")

    def __init__(self, aliases: Iterable[str | None] = ()) -> None:
        self._aliases: list[str] = []
        self._seen: set[str] = set()
        self.extend(aliases)

    def add(self, alias: str | None) -> bool:
        """Append a trimmed alias unless blank or already present."""
        normalized = normalize_alias(alias)
        if not normalized or normalized in self._seen:
            return False
        self._seen.add(normalized)
        self._aliases.append(normalized)
        return True

    def extend(self, aliases: Iterable[str | None]) -> None:
        for alias in aliases:
            self.add(alias)

    def to_list(self) -> list[str]:
        return list(self._aliases)

    def __contains__(self, alias: object) -> bool:
        return alias in self._seen

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __repr__(self) -> str:
        return f"AliasSet({self._aliases!r})"


def normalize_alias(value: str | None) -> str | None:
    """Trim an alias; ``None`` stays ``None``."""
    if value is None:
        return None
    return value.strip()


def strip_parenthetical(name: str) -> str:
    """Remove ``(...)`` qualifiers, e.g. ``"Korea (Republic of)"`` → ``"Korea"``."""
    return _WHITESPACE_RE.sub(" ", _PARENTHETICAL_RE.sub(" ", name)).strip()


def aliases_for_place(place: Place, catalog: PlaceCatalog) -> AliasSet:
    """Synthesize the alias set of one place."""
    name = normalize_alias(place.name_en) or ""
    aliases = AliasSet([place.place_code, name])

    without_qualifier = strip_parenthetical(name)
    if without_qualifier and without_qualifier != name:
        aliases.add(without_qualifier)

    aliases.extend(catalog.alias_extras.get(place.place_code, ()))
    return aliases


def build_aliases(places: list[Place], catalog: PlaceCatalog) -> dict[str, AliasSet]:
    """Synthesize alias sets for every place, keyed in place-list order.

    Manual catalog places missing from ``places`` still receive an alias
    set of their code and English name.
    """
    table: dict[str, AliasSet] = {}
    for place in places:
        table[place.place_code] = aliases_for_place(place, catalog)

    for manual in catalog.manual_places:
        if manual.place_code not in table:
            table[manual.place_code] = AliasSet([manual.place_code, manual.name_en])

    logger.info(
        "Aliases built | places=%d | aliases=%d",
        len(table),
        sum(len(aliases) for aliases in table.values()),
    )
    return table


def aliases_to_dict(table: dict[str, AliasSet]) -> dict[str, list[str]]:
    """Convert an alias table to plain lists for serialisation."""
    return {code: aliases.to_list() for code, aliases in table.items()}
