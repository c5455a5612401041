"""Tests for HierarchyCompiler."""

import logging
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from live_grouping.compiler import HierarchyCompiler
from live_grouping.exceptions import MediaUploadError
from live_grouping.generators import TowerPopulator, UnitRecordBuilder
from live_grouping.models import (
    GlobalUnitDefaults,
    LocalFile,
    ProjectData,
    PropertyType,
    UnitStatus,
)
from live_grouping.store import PropertyTypeStore


def _project(*types: PropertyType, **values) -> ProjectData:
    project = ProjectData(**values)
    project.type = PropertyType.MIXED_USE if len(types) > 1 else types[0]
    project.property_types = list(types)
    return project


@pytest.fixture
def compiler(builder: UnitRecordBuilder) -> HierarchyCompiler:
    return HierarchyCompiler(builder)


def _apartment_tower(store: PropertyTypeStore, populator: TowerPopulator) -> None:
    store.select_type(PropertyType.APARTMENT)
    store.update_tower_field(PropertyType.APARTMENT, 0, "floors", 2)
    store.update_tower_field(PropertyType.APARTMENT, 0, "units_per_floor", 2)
    store.update_tower_field(PropertyType.APARTMENT, 0, "has_ground_floor", True)
    store.populate_tower(PropertyType.APARTMENT, 0, populator)


class TestApartmentCompile:
    """Tests for compiling floor-organized towers."""

    def test_apartment_tower(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)

        towers = compiler.compile(_project(PropertyType.APARTMENT), store)

        assert len(towers) == 1
        tower = towers[0]
        assert tower.tower_name == "Tower 1"
        assert tower.total_floors == 2
        assert len(tower.units) == 6
        assert sorted({u.floor_number for u in tower.units}) == [0, 1, 2]
        assert all(u.price == Decimal("4500000") for u in tower.units)
        assert all(u.status == UnitStatus.AVAILABLE for u in tower.units)

    def test_floors_ascending(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)

        tower = compiler.compile(_project(PropertyType.APARTMENT), store)[0]

        floors = [u.floor_number for u in tower.units]
        assert floors == sorted(floors)

    def test_generic_unit_type_gets_canonical_label(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)
        store.update_unit(PropertyType.APARTMENT, 0, 1, 1, "unit_type", "3BHK")

        units = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units

        assert units[0].unit_type == "Apartment"
        assert "3BHK" in {u.unit_type for u in units}

    def test_default_units_follow_current_defaults(
        self, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)
        store.update_unit(PropertyType.APARTMENT, 0, 1, 0, "area", "500")
        compiler = HierarchyCompiler(
            UnitRecordBuilder(GlobalUnitDefaults(area=2000, base_rate=1000, discount_rate=""))
        )

        units = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units

        custom = [u for u in units if u.is_custom]
        default = [u for u in units if not u.is_custom]
        assert len(custom) == 1
        assert custom[0].area == Decimal("500")
        assert custom[0].price == Decimal("2250000")
        assert all(u.price == Decimal("2000000") for u in default)

    def test_residential_payload_copied(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)

        unit = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units[0]

        assert unit.carpet_area == Decimal("800")
        assert unit.plot_width is None

    def test_unnamed_tower_fallback(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        store.select_type(PropertyType.BUNGALOW)
        store.update_tower_field(PropertyType.BUNGALOW, 0, "name", "")
        store.update_tower_field(PropertyType.BUNGALOW, 0, "total_bungalows", 2)
        store.populate_tower(PropertyType.BUNGALOW, 0, populator)

        tower = compiler.compile(_project(PropertyType.BUNGALOW), store)[0]

        assert tower.tower_name == "Bungalow Block 1"
        assert tower.total_floors == 0
        assert [u.unit_number for u in tower.units] == ["B-1", "B-2"]
        assert tower.units[0].unit_type == "Bungalow"


class TestCommercialCompile:
    """Tests for the synthesized commercial block."""

    def test_commercial_block(self, compiler: HierarchyCompiler, store: PropertyTypeStore) -> None:
        store.select_type(PropertyType.COMMERCIAL)
        store.update_config(PropertyType.COMMERCIAL, "total_units", 3)
        store.update_config(PropertyType.COMMERCIAL, "layout_columns", 2)
        store.update_config(PropertyType.COMMERCIAL, "plot_size_width", 20)
        store.update_config(PropertyType.COMMERCIAL, "plot_size_depth", 30)
        project = _project(PropertyType.COMMERCIAL, regular_price_per_sqft="4000")

        towers = compiler.compile(project, store)

        assert len(towers) == 1
        tower = towers[0]
        assert tower.tower_name == "Commercial Block"
        assert tower.total_floors == 1
        assert tower.layout_columns == 2
        assert tower.layout_rows == 2
        assert [u.unit_number for u in tower.units] == ["C-1", "C-2", "C-3"]
        assert all(u.floor_number == 0 for u in tower.units)
        assert all(u.area == Decimal("600") for u in tower.units)
        assert all(u.price == Decimal("2400000") for u in tower.units)
        assert tower.units[0].plot_width == Decimal("20")

    def test_commercial_without_dimensions(self, compiler: HierarchyCompiler, store: PropertyTypeStore) -> None:
        store.select_type(PropertyType.COMMERCIAL)
        store.update_config(PropertyType.COMMERCIAL, "total_units", 1)
        store.update_config(PropertyType.COMMERCIAL, "plot_size_depth", "")

        unit = compiler.compile(_project(PropertyType.COMMERCIAL, regular_price_per_sqft="4000"), store)[0].units[0]

        assert unit.area == Decimal("0")
        assert unit.price == Decimal("0")

    def test_commercial_compiled_first(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)
        store.select_type(PropertyType.COMMERCIAL)
        store.update_config(PropertyType.COMMERCIAL, "total_units", 2)

        towers = compiler.compile(_project(PropertyType.APARTMENT, PropertyType.COMMERCIAL), store)

        assert [t.property_type for t in towers] == [PropertyType.COMMERCIAL, PropertyType.APARTMENT]

    def test_unselected_types_ignored(
        self, compiler: HierarchyCompiler, store: PropertyTypeStore, populator: TowerPopulator
    ) -> None:
        _apartment_tower(store, populator)

        assert compiler.compile(_project(PropertyType.PLOT), store) == []


class TestImageUpload:
    """Tests for unit image uploads during compile."""

    def _store_with_image(
        self, store: PropertyTypeStore, populator: TowerPopulator, image_file: LocalFile
    ) -> PropertyTypeStore:
        _apartment_tower(store, populator)
        store.update_unit(PropertyType.APARTMENT, 0, 0, 0, "unit_image_file", image_file)
        return store

    def test_uploaded_url_used(
        self,
        builder: UnitRecordBuilder,
        store: PropertyTypeStore,
        populator: TowerPopulator,
        image_file: LocalFile,
    ) -> None:
        media = MagicMock()
        media.upload_image.return_value = {"url": "/media/abc.png"}
        compiler = HierarchyCompiler(builder, media=media)

        units = compiler.compile(_project(PropertyType.APARTMENT), self._store_with_image(store, populator, image_file))[0].units

        media.upload_image.assert_called_once_with(image_file)
        assert [u.unit_image_url for u in units if u.unit_image_url] == ["/media/abc.png"]

    def test_failed_upload_keeps_unit(
        self,
        builder: UnitRecordBuilder,
        store: PropertyTypeStore,
        populator: TowerPopulator,
        image_file: LocalFile,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        media = MagicMock()
        media.upload_image.side_effect = MediaUploadError("disk full")
        compiler = HierarchyCompiler(builder, media=media)
        self._store_with_image(store, populator, image_file)
        store.update_unit(PropertyType.APARTMENT, 0, 0, 0, "unit_image_url", "/media/old.png")

        with caplog.at_level(logging.ERROR, logger="live_grouping.compiler"):
            units = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units

        assert len(units) == 6
        assert units[0].unit_image_url == "/media/old.png"
        assert "upload failed" in caplog.text

    def test_no_media_backend(
        self,
        compiler: HierarchyCompiler,
        store: PropertyTypeStore,
        populator: TowerPopulator,
        image_file: LocalFile,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        self._store_with_image(store, populator, image_file)

        with caplog.at_level(logging.WARNING, logger="live_grouping.compiler"):
            units = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units

        assert units[0].unit_image_url is None
        assert "not uploaded" in caplog.text

    def test_unexpected_upload_error_keeps_unit(
        self,
        builder: UnitRecordBuilder,
        store: PropertyTypeStore,
        populator: TowerPopulator,
        image_file: LocalFile,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        media = MagicMock()
        media.upload_image.side_effect = TypeError("bad response")
        compiler = HierarchyCompiler(builder, media=media)
        self._store_with_image(store, populator, image_file)
        store.update_unit(PropertyType.APARTMENT, 0, 0, 0, "unit_image_url", "/media/old.png")

        with caplog.at_level(logging.ERROR, logger="live_grouping.compiler"):
            units = compiler.compile(_project(PropertyType.APARTMENT), store)[0].units

        assert len(units) == 6
        assert units[0].unit_image_url == "/media/old.png"
        assert "upload failed" in caplog.text
        assert "bad response" in caplog.text
