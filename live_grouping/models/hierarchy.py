"""Tower-level models: defaults, per-type configuration, towers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar

from live_grouping.models.base import to_decimal, to_int
from live_grouping.models.enums import PropertyType, parent_label
from live_grouping.models.unit import CompiledUnit


@dataclass(frozen=True)
class GlobalUnitDefaults:
    """Template applied to generated units that are not customized.

    Held by the wizard and passed explicitly to the unit builder; replace
    it (``dataclasses.replace``) to change the defaults.
    """

    unit_type: str = "Flat"
    area: Decimal = Decimal("1500")
    carpet_area: Decimal = Decimal("1200")
    base_rate: Decimal = Decimal("5000")
    discount_rate: Decimal | None = Decimal("4500")

    def __post_init__(self) -> None:
        # Accept raw form values and normalize them once
        object.__setattr__(self, "area", to_decimal(self.area) or Decimal("0"))
        object.__setattr__(self, "carpet_area", to_decimal(self.carpet_area) or Decimal("0"))
        object.__setattr__(self, "base_rate", to_decimal(self.base_rate) or Decimal("0"))
        object.__setattr__(self, "discount_rate", to_decimal(self.discount_rate))


@dataclass
class PropertyConfig:
    """Layout parameters for one selected property type."""

    layout_columns: int | None = 1
    layout_rows: int | None = 1
    plot_size_width: Decimal | None = Decimal("30")
    plot_size_depth: Decimal | None = Decimal("40")
    road_width: Decimal | None = Decimal("60")
    plot_gap: Decimal | None = Decimal("0")
    parking_type: str = "Front"
    parking_slots: int | None = None
    entry_points: int | None = None
    orientation: str | None = None
    total_units: int | None = None
    commercial_floor_count: int | None = 1

    INTEGER_FIELDS: ClassVar[tuple[str, ...]] = (
        "layout_columns",
        "layout_rows",
        "parking_slots",
        "entry_points",
        "total_units",
        "commercial_floor_count",
    )
    DECIMAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "plot_size_width",
        "plot_size_depth",
        "road_width",
        "plot_gap",
    )

    @classmethod
    def for_type(cls, property_type: PropertyType) -> PropertyConfig:
        """Initial configuration for a newly selected type."""
        if property_type == PropertyType.COMMERCIAL:
            return cls(layout_columns=5, layout_rows=1)
        if property_type == PropertyType.PLOT:
            return cls(layout_columns=4, layout_rows=5)
        return cls()

    def coerce(self, name: str, value: Any) -> Any:
        """Parse a form value for the named field."""
        if name in self.INTEGER_FIELDS:
            return to_int(value)
        if name in self.DECIMAL_FIELDS:
            return to_decimal(value)
        return value


@dataclass
class TowerDraft:
    """A tower, block or sector row being configured in the wizard."""

    name: str
    floors: int | None = 0
    units_per_floor: int | None = 4
    layout_columns: int | None = None
    layout_rows: int | None = None
    total_bungalows: int | None = 0
    has_basement: bool = False
    has_ground_floor: bool = False
    bungalow_type: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    INTEGER_FIELDS: ClassVar[tuple[str, ...]] = (
        "floors",
        "units_per_floor",
        "total_bungalows",
        "layout_columns",
        "layout_rows",
    )

    @classmethod
    def first_for_type(cls, property_type: PropertyType) -> TowerDraft:
        """The single tower a type starts with when it is selected."""
        is_plot = property_type == PropertyType.PLOT
        is_bungalow = property_type in (PropertyType.BUNGALOW, PropertyType.TWIN_VILLA)
        return cls(
            name=f"{parent_label(property_type)} 1",
            floors=10 if property_type == PropertyType.APARTMENT else 0,
            units_per_floor=4,
            layout_columns=4 if is_plot else 1,
            layout_rows=5 if is_plot else 1,
            total_bungalows=10 if is_bungalow else 0,
        )


@dataclass
class Tower:
    """Compiled tower, ready for submission or read back from persistence."""

    tower_name: str
    property_type: PropertyType
    total_floors: int
    layout_columns: int | None = None
    layout_rows: int | None = None
    units: list[CompiledUnit] = field(default_factory=list)
    tower_id: str | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any], units: list[CompiledUnit]) -> Tower:
        """Build from a stored tower document and its units."""
        return cls(
            tower_name=doc["tower_name"],
            property_type=PropertyType(doc["property_type"]),
            total_floors=to_int(doc.get("total_floors")) or 0,
            layout_columns=to_int(doc.get("layout_columns")),
            layout_rows=to_int(doc.get("layout_rows")),
            units=units,
            tower_id=doc.get("tower_id"),
        )
