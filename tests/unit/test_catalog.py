"""Tests for the curated place catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from world_places.core.catalog import (
    DEFAULT_CATALOG_PATH,
    CatalogError,
    ManualPlace,
    PlaceCatalog,
    load_catalog,
)
from world_places.models.place import PlaceType


class TestPackagedCatalog:
    def test_file_shipped(self) -> None:
        assert DEFAULT_CATALOG_PATH.is_file()

    def test_contested_codes(self, catalog: PlaceCatalog) -> None:
        assert catalog.contested_codes == frozenset({"HK", "MO", "PR", "TW", "PS", "EH", "XK"})

    def test_kosovo_special_cases(self, catalog: PlaceCatalog) -> None:
        assert catalog.special_feature_names == {"Kosovo": "XK"}
        assert catalog.geometry_id_overrides == {"XK": "XK"}

    def test_manual_place(self, catalog: PlaceCatalog) -> None:
        assert catalog.manual_places == (
            ManualPlace(
                place_code="XNC",
                type=PlaceType.SPECIAL,
                name_en="Keikoku",
                name_ja="Keikoku",
                is_active=False,
                geometry_id="XNC",
            ),
        )

    def test_alias_extras(self, catalog: PlaceCatalog) -> None:
        assert catalog.alias_extras["TW"] == ("Taiwan", "Republic of China")
        assert set(catalog.alias_extras) == {"HK", "MO", "PR", "TW", "PS", "EH", "XK"}


class TestLoadCatalog:
    def test_custom_file(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "contested_codes: [TW]\n"
            "manual_places:\n"
            "  - place_code: XAA\n"
            "    name_en: Aye\n",
            encoding="utf-8",
        )
        catalog = load_catalog(path)
        assert catalog.contested_codes == frozenset({"TW"})
        manual = catalog.manual_places[0]
        assert manual.type is PlaceType.SPECIAL
        assert manual.name_ja == "Aye"
        assert manual.is_active is False
        assert catalog.alias_extras == {}

    def test_empty_file_is_empty_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_catalog(path) == PlaceCatalog()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            load_catalog(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("contested_codes: [TW\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="not valid YAML"):
            load_catalog(path)

    def test_root_not_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- TW\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="root must be a mapping"):
            load_catalog(path)


class TestPlaceCatalogFromDict:
    def test_contested_not_list(self) -> None:
        with pytest.raises(CatalogError, match="contested_codes"):
            PlaceCatalog.from_dict({"contested_codes": "TW"})

    def test_manual_without_code(self) -> None:
        with pytest.raises(CatalogError, match=r"manual_places\[0\]"):
            PlaceCatalog.from_dict({"manual_places": [{"name_en": "x"}]})

    def test_manual_unknown_type(self) -> None:
        with pytest.raises(CatalogError, match="unknown type"):
            PlaceCatalog.from_dict({"manual_places": [{"place_code": "XA", "type": "planet"}]})

    def test_duplicate_manual_codes(self) -> None:
        with pytest.raises(CatalogError, match="duplicate"):
            PlaceCatalog.from_dict(
                {"manual_places": [{"place_code": "XA"}, {"place_code": "XA"}]}
            )

    def test_alias_extras_must_be_lists(self) -> None:
        with pytest.raises(CatalogError, match=r"alias_extras\[TW\]"):
            PlaceCatalog.from_dict({"alias_extras": {"TW": "Taiwan"}})

    def test_error_is_validation_category(self) -> None:
        assert CatalogError("x").category == "validation"
