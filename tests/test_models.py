"""Tests for domain models."""

from decimal import Decimal

import pytest

from live_grouping.exceptions import ValidationError
from live_grouping.models import (
    CommercialPayload,
    CompiledUnit,
    GlobalUnitDefaults,
    LocalFile,
    PlotPayload,
    Project,
    ProjectData,
    PropertyConfig,
    PropertyType,
    ResidentialPayload,
    Tower,
    TowerDraft,
    Unit,
    UnitStatus,
    child_label,
    is_blank,
    parent_label,
    payload_for,
    to_decimal,
    to_int,
)


class TestCoercion:
    """Tests for form value coercion helpers."""

    def test_is_blank(self) -> None:
        assert is_blank(None)
        assert is_blank("")
        assert is_blank("   ")
        assert not is_blank("0")
        assert not is_blank(0)

    def test_to_decimal_parses_strings(self) -> None:
        assert to_decimal("1500") == Decimal("1500")
        assert to_decimal(" 12.5 ") == Decimal("12.5")
        assert to_decimal(3) == Decimal("3")

    def test_to_decimal_blank_is_none(self) -> None:
        assert to_decimal("") is None
        assert to_decimal(None) is None

    def test_to_decimal_rejects_garbage(self) -> None:
        with pytest.raises(ValidationError, match="Expected a number"):
            to_decimal("abc")

    def test_to_decimal_rejects_bool(self) -> None:
        with pytest.raises(ValidationError):
            to_decimal(True)

    def test_to_decimal_rejects_non_finite(self) -> None:
        with pytest.raises(ValidationError, match="finite"):
            to_decimal("NaN")

    def test_to_int(self) -> None:
        assert to_int("10") == 10
        assert to_int("10.0") == 10
        assert to_int(7) == 7
        assert to_int("") is None

    def test_to_int_rejects_fraction(self) -> None:
        with pytest.raises(ValidationError, match="integer"):
            to_int("2.5")


class TestLabels:
    """Tests for per-type display labels."""

    def test_parent_labels(self) -> None:
        assert parent_label(PropertyType.APARTMENT) == "Tower"
        assert parent_label(PropertyType.PLOT) == "Sector"
        assert parent_label("bungalow") == "Block"

    def test_child_labels(self) -> None:
        assert child_label(PropertyType.TWIN_VILLA) == "Twin Villa"
        assert child_label(PropertyType.COMMERCIAL) == "Unit"

    def test_unknown_type_falls_back(self) -> None:
        assert parent_label("castle") == "Group"
        assert child_label("castle") == "Item"


class TestPayload:
    """Tests for the type-tagged unit payload."""

    def test_payload_for_type(self) -> None:
        assert isinstance(payload_for(PropertyType.APARTMENT), ResidentialPayload)
        assert isinstance(payload_for(PropertyType.BUNGALOW), ResidentialPayload)
        assert isinstance(payload_for(PropertyType.PLOT), PlotPayload)
        assert isinstance(payload_for(PropertyType.COMMERCIAL), CommercialPayload)

    def test_plot_derived_area(self) -> None:
        payload = PlotPayload(plot_width=Decimal("30"), plot_depth=Decimal("40"))

        assert payload.derived_area == Decimal("1200")

    def test_plot_derived_area_needs_both_positive(self) -> None:
        assert PlotPayload(plot_width=Decimal("30")).derived_area is None
        assert PlotPayload(plot_width=Decimal("0"), plot_depth=Decimal("40")).derived_area is None


class TestUnit:
    """Tests for the draft Unit model."""

    def _apartment(self, **kwargs) -> Unit:
        values = {
            "unit_number": "101",
            "property_type": PropertyType.APARTMENT,
            "unit_type": "Flat",
            "area": Decimal("1500"),
            "price_per_sqft": Decimal("5000"),
            "discount_price_per_sqft": Decimal("4500"),
        }
        values.update(kwargs)
        return Unit(**values)

    def test_price_uses_discount_rate(self) -> None:
        unit = self._apartment()
        unit.derive()

        assert unit.price == Decimal("6750000")

    def test_price_falls_back_to_regular_rate(self) -> None:
        unit = self._apartment(discount_price_per_sqft=None)
        unit.derive()

        assert unit.price == Decimal("7500000")

    def test_price_zero_without_rates(self) -> None:
        unit = self._apartment(price_per_sqft=None, discount_price_per_sqft=None)
        unit.derive()

        assert unit.price == Decimal("0")

    def test_plot_area_derives_from_dimensions(self) -> None:
        unit = Unit(
            unit_number="P-1",
            property_type=PropertyType.PLOT,
            unit_type="Plot",
            area=Decimal("999"),
            price_per_sqft=Decimal("2000"),
            payload=PlotPayload(plot_width=Decimal("30"), plot_depth=Decimal("40")),
        )
        unit.derive()

        assert unit.area == Decimal("1200")
        assert unit.price == Decimal("2400000")

    def test_bungalow_area_falls_back_to_super_built_up(self) -> None:
        unit = Unit(
            unit_number="B-1",
            property_type=PropertyType.BUNGALOW,
            unit_type="Bungalow",
            area=None,
            price_per_sqft=Decimal("3000"),
            payload=ResidentialPayload(super_built_up_area=Decimal("2000")),
        )
        unit.derive()

        assert unit.effective_area == Decimal("2000")
        assert unit.price == Decimal("6000000")

    def test_set_field_routes_to_payload(self) -> None:
        unit = self._apartment()
        unit.set_field("carpet_area", "1100")
        unit.set_field("area", "1400")

        assert unit.payload.carpet_area == Decimal("1100")
        assert unit.area == Decimal("1400")

    def test_set_field_rejects_foreign_payload_field(self) -> None:
        unit = self._apartment()

        with pytest.raises(ValidationError, match="does not apply"):
            unit.set_field("plot_width", "30")

    def test_set_field_rejects_unknown(self) -> None:
        unit = self._apartment()

        with pytest.raises(ValidationError, match="Unknown unit field"):
            unit.set_field("price", "1")

    def test_set_field_image_file_type_checked(self) -> None:
        unit = self._apartment()
        unit.set_field("unit_image_file", LocalFile("a.png", b"x"))

        assert unit.unit_image_file.filename == "a.png"
        with pytest.raises(ValidationError):
            unit.set_field("unit_image_file", "a.png")

    def test_copy_is_deep(self) -> None:
        unit = self._apartment(payload=ResidentialPayload(carpet_area=Decimal("1200")))
        clone = unit.copy()
        clone.payload.carpet_area = Decimal("1")
        clone.unit_number = "102"

        assert unit.payload.carpet_area == Decimal("1200")
        assert unit.unit_number == "101"


class TestCompiledUnit:
    """Tests for CompiledUnit."""

    def test_from_document(self) -> None:
        unit = CompiledUnit.from_document(
            {
                "unit_id": "u-1",
                "unit_number": "C-1",
                "unit_type": "Commercial",
                "floor_number": 0,
                "area": "600",
                "price": "2400000",
                "status": "locked",
                "tower_id": "ignored",
            }
        )

        assert unit.unit_id == "u-1"
        assert unit.area == Decimal("600")
        assert unit.price == Decimal("2400000")
        assert unit.status == UnitStatus.LOCKED

    def test_from_document_defaults(self) -> None:
        unit = CompiledUnit.from_document(
            {"unit_number": "1", "unit_type": "Flat", "floor_number": 1, "area": None}
        )

        assert unit.price == Decimal("0")
        assert unit.status == UnitStatus.AVAILABLE


class TestGlobalUnitDefaults:
    """Tests for GlobalUnitDefaults."""

    def test_coerces_form_values(self) -> None:
        defaults = GlobalUnitDefaults(area="1000", carpet_area="", base_rate=4000, discount_rate="")

        assert defaults.area == Decimal("1000")
        assert defaults.carpet_area == Decimal("0")
        assert defaults.base_rate == Decimal("4000")
        assert defaults.discount_rate is None

    def test_is_frozen(self) -> None:
        defaults = GlobalUnitDefaults()

        with pytest.raises(AttributeError):
            defaults.area = Decimal("1")  # type: ignore[misc]


class TestPropertyConfig:
    """Tests for PropertyConfig."""

    def test_defaults(self) -> None:
        config = PropertyConfig()

        assert config.plot_size_width == Decimal("30")
        assert config.plot_size_depth == Decimal("40")
        assert config.road_width == Decimal("60")
        assert config.parking_type == "Front"
        assert config.total_units is None

    def test_for_type(self) -> None:
        assert PropertyConfig.for_type(PropertyType.COMMERCIAL).layout_columns == 5
        plot = PropertyConfig.for_type(PropertyType.PLOT)
        assert (plot.layout_columns, plot.layout_rows) == (4, 5)

    def test_coerce(self) -> None:
        config = PropertyConfig()

        assert config.coerce("total_units", "3") == 3
        assert config.coerce("road_width", "") is None
        assert config.coerce("parking_type", "Basement") == "Basement"


class TestTowerDraft:
    """Tests for TowerDraft."""

    def test_first_for_apartment(self) -> None:
        tower = TowerDraft.first_for_type(PropertyType.APARTMENT)

        assert tower.name == "Tower 1"
        assert tower.floors == 10
        assert tower.units_per_floor == 4

    def test_first_for_plot(self) -> None:
        tower = TowerDraft.first_for_type(PropertyType.PLOT)

        assert tower.name == "Sector 1"
        assert (tower.layout_columns, tower.layout_rows) == (4, 5)

    def test_first_for_bungalow(self) -> None:
        tower = TowerDraft.first_for_type(PropertyType.BUNGALOW)

        assert tower.name == "Block 1"
        assert tower.total_bungalows == 10
        assert tower.floors == 0


class TestProjectData:
    """Tests for ProjectData."""

    def test_update(self) -> None:
        data = ProjectData()
        data.update(title="Green Acres", min_buyers="5")

        assert data.title == "Green Acres"
        assert data.min_buyers == "5"

    def test_update_rejects_unknown(self) -> None:
        with pytest.raises(ValidationError, match="Unknown project field"):
            ProjectData().update(colour="red")

    def test_update_rejects_type_fields(self) -> None:
        with pytest.raises(ValidationError):
            ProjectData().update(type=PropertyType.PLOT)

    def test_sanitized(self) -> None:
        data = ProjectData(
            title="Green Acres",
            min_buyers="5",
            area="",
            regular_price_per_sqft="4000",
            type=PropertyType.APARTMENT,
            property_types=[PropertyType.APARTMENT],
        )
        payload = data.sanitized()

        assert payload["min_buyers"] == 5
        assert payload["area"] is None
        assert payload["regular_price_per_sqft"] == Decimal("4000")
        assert payload["property_types"] == [PropertyType.APARTMENT]
        assert payload["property_types"] is not data.property_types


class TestProject:
    """Tests for the Project read model."""

    def test_counts(self) -> None:
        unit = CompiledUnit(unit_number="1", unit_type="Flat", floor_number=1, area=None, price=Decimal("0"))
        towers = [
            Tower(tower_name="A", property_type=PropertyType.APARTMENT, total_floors=1, units=[unit, unit]),
            Tower(tower_name="B", property_type=PropertyType.APARTMENT, total_floors=1, units=[unit]),
        ]
        project = Project(project_id="p-1", title="X", property_type=PropertyType.APARTMENT, towers=towers)

        assert project.tower_count == 2
        assert project.total_slots == 3

    def test_tower_from_document(self) -> None:
        tower = Tower.from_document(
            {"tower_name": "Commercial Block", "property_type": "commercial", "total_floors": "1", "layout_rows": 2},
            units=[],
        )

        assert tower.property_type == PropertyType.COMMERCIAL
        assert tower.total_floors == 1
        assert tower.layout_rows == 2
        assert tower.layout_columns is None
