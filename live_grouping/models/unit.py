"""Unit models: draft units held by the wizard and compiled units."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, ClassVar

from live_grouping.exceptions import ValidationError
from live_grouping.models.base import LocalFile, to_decimal
from live_grouping.models.enums import PropertyType, UnitStatus


@dataclass
class ResidentialPayload:
    """Built-up metrics for flats, bungalows and twin villas."""

    carpet_area: Decimal | None = None
    super_built_up_area: Decimal | None = None


@dataclass
class PlotPayload:
    """Land dimensions of a plot; the plot area derives from them."""

    plot_width: Decimal | None = None
    plot_depth: Decimal | None = None

    @property
    def derived_area(self) -> Decimal | None:
        """Width x depth when both dimensions are positive."""
        if self.plot_width and self.plot_depth and self.plot_width > 0 and self.plot_depth > 0:
            return self.plot_width * self.plot_depth
        return None


@dataclass
class CommercialPayload:
    """Frontage and depth of a shop in a commercial grid."""

    plot_width: Decimal | None = None
    plot_depth: Decimal | None = None


UnitPayload = ResidentialPayload | PlotPayload | CommercialPayload


def payload_for(property_type: PropertyType) -> UnitPayload:
    """Create the empty payload variant selected by the property type tag."""
    if property_type == PropertyType.PLOT:
        return PlotPayload()
    if property_type == PropertyType.COMMERCIAL:
        return CommercialPayload()
    return ResidentialPayload()


@dataclass
class Unit:
    """Draft unit in wizard state.

    The shared fields live on the unit itself; the fields that only make
    sense for some property types live on ``payload``, whose variant is
    fixed by ``property_type``.

    ``price`` is always derived: ``effective_rate * effective_area``.
    """

    unit_number: str
    property_type: PropertyType
    unit_type: str
    area: Decimal | None = None
    price_per_sqft: Decimal | None = None
    discount_price_per_sqft: Decimal | None = None
    payload: UnitPayload = field(default_factory=ResidentialPayload)
    price: Decimal = Decimal("0")
    is_custom: bool = False
    flat_label: str | None = None
    unit_image_url: str | None = None
    # Transient: dropped when the hierarchy is compiled
    unit_image_file: LocalFile | None = None
    local_image_preview: str | None = None

    DECIMAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "area",
        "price_per_sqft",
        "discount_price_per_sqft",
    )
    TEXT_FIELDS: ClassVar[tuple[str, ...]] = (
        "unit_number",
        "unit_type",
        "flat_label",
        "unit_image_url",
        "local_image_preview",
    )
    TRANSIENT_FIELDS: ClassVar[tuple[str, ...]] = ("unit_image_file", "local_image_preview")

    @property
    def effective_rate(self) -> Decimal:
        """Discount rate when set, otherwise the regular rate."""
        if self.discount_price_per_sqft is not None:
            return self.discount_price_per_sqft
        return self.price_per_sqft or Decimal("0")

    @property
    def effective_area(self) -> Decimal:
        """Area used for pricing."""
        if isinstance(self.payload, PlotPayload):
            derived = self.payload.derived_area
            if derived is not None:
                return derived
        if not self.area and self.property_type in (PropertyType.BUNGALOW, PropertyType.TWIN_VILLA):
            if isinstance(self.payload, ResidentialPayload) and self.payload.super_built_up_area:
                return self.payload.super_built_up_area
        return self.area or Decimal("0")

    def derive(self) -> None:
        """Recompute the derived plot area and the price."""
        if isinstance(self.payload, PlotPayload):
            derived = self.payload.derived_area
            if derived is not None:
                self.area = derived
        self.price = self.effective_rate * self.effective_area

    def set_field(self, name: str, value: Any) -> None:
        """Assign one field, routing type-specific fields to the payload.

        Does not re-derive; callers batch assignments and derive once.
        """
        if name in self.DECIMAL_FIELDS:
            setattr(self, name, to_decimal(value))
        elif name in self.TEXT_FIELDS:
            setattr(self, name, None if value is None else str(value))
        elif name == "is_custom":
            self.is_custom = bool(value)
        elif name == "unit_image_file":
            if value is not None and not isinstance(value, LocalFile):
                raise ValidationError("unit_image_file must be a LocalFile")
            self.unit_image_file = value
        elif name in _PAYLOAD_FIELDS:
            if name not in {f.name for f in fields(self.payload)}:
                raise ValidationError(
                    f"Field {name!r} does not apply to {self.property_type.value} units"
                )
            setattr(self.payload, name, to_decimal(value))
        else:
            raise ValidationError(f"Unknown unit field {name!r}")

    def copy(self) -> Unit:
        """Deep copy, including the payload and customization flag."""
        return copy.deepcopy(self)


_PAYLOAD_FIELDS = frozenset(
    f.name
    for payload_cls in (ResidentialPayload, PlotPayload, CommercialPayload)
    for f in fields(payload_cls)
)


@dataclass
class CompiledUnit:
    """Unit as submitted to and read back from persistence."""

    unit_number: str
    unit_type: str
    floor_number: int
    area: Decimal | None
    price: Decimal
    price_per_sqft: Decimal | None = None
    discount_price_per_sqft: Decimal | None = None
    carpet_area: Decimal | None = None
    super_built_up_area: Decimal | None = None
    plot_width: Decimal | None = None
    plot_depth: Decimal | None = None
    flat_label: str | None = None
    unit_image_url: str | None = None
    is_custom: bool = False
    status: UnitStatus = UnitStatus.AVAILABLE
    booked_by: str | None = None
    payment_id: str | None = None
    unit_id: str | None = None

    DECIMAL_FIELDS: ClassVar[tuple[str, ...]] = (
        "area",
        "price",
        "price_per_sqft",
        "discount_price_per_sqft",
        "carpet_area",
        "super_built_up_area",
        "plot_width",
        "plot_depth",
    )

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> CompiledUnit:
        """Build from a stored document."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in doc.items() if k in known}
        for name in cls.DECIMAL_FIELDS:
            if name in values:
                values[name] = to_decimal(values[name])
        if values.get("price") is None:
            values["price"] = Decimal("0")
        values["status"] = UnitStatus(values.get("status", UnitStatus.AVAILABLE))
        return cls(**values)
