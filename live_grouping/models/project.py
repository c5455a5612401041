"""Project models: wizard basics and the persisted read model."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar

from live_grouping.exceptions import ValidationError
from live_grouping.models.base import to_decimal, to_int
from live_grouping.models.enums import ProjectStatus, PropertyType
from live_grouping.models.hierarchy import Tower


@dataclass
class ProjectData:
    """Project basics as entered in the wizard.

    Values are kept as the form supplied them; numeric fields are
    sanitized (blank -> None) when the project is submitted.
    """

    title: str = ""
    developer: str = ""
    location: str = ""
    latitude: Any = None
    longitude: Any = None
    map_address: str = ""
    description: str = ""
    type: PropertyType | None = None
    property_types: list[PropertyType] = field(default_factory=list)
    min_buyers: Any = None
    area: Any = None
    possession: str = ""
    rera_number: str = ""
    # Offer
    offer_type: str = ""
    discount_percentage: Any = None
    discount_label: str = ""
    offer_expiry_datetime: str = ""
    original_price: Any = None
    group_price: Any = None
    discount: Any = None
    savings: Any = None
    # Pricing
    regular_price_per_sqft: Any = None
    regular_price_per_sqft_max: Any = None
    group_price_per_sqft: Any = None
    group_price_per_sqft_max: Any = None
    price_unit: str = "sq ft"
    currency: str = "INR"
    regular_total_price: Any = None
    discounted_total_price_min: Any = None
    discounted_total_price_max: Any = None
    total_savings_min: Any = None
    total_savings_max: Any = None
    regular_price_min: Any = None
    regular_price_max: Any = None

    NUMERIC_FIELDS: ClassVar[tuple[str, ...]] = (
        "latitude",
        "longitude",
        "area",
        "discount_percentage",
        "original_price",
        "group_price",
        "discount",
        "savings",
        "regular_price_per_sqft",
        "regular_price_per_sqft_max",
        "group_price_per_sqft",
        "group_price_per_sqft_max",
        "regular_total_price",
        "discounted_total_price_min",
        "discounted_total_price_max",
        "total_savings_min",
        "total_savings_max",
        "regular_price_min",
        "regular_price_max",
    )
    PROTECTED_FIELDS: ClassVar[tuple[str, ...]] = ("type", "property_types")

    def update(self, **values: Any) -> None:
        """Set basics fields from form input."""
        known = {f.name for f in fields(self)}
        for name, value in values.items():
            if name not in known:
                raise ValidationError(f"Unknown project field {name!r}")
            if name in self.PROTECTED_FIELDS:
                raise ValidationError(f"{name!r} is set by the type selection step")
            setattr(self, name, value)

    def sanitized(self) -> dict[str, Any]:
        """Submission payload with numeric blanks mapped to None."""
        payload = {f.name: getattr(self, f.name) for f in fields(self)}
        for name in self.NUMERIC_FIELDS:
            payload[name] = to_decimal(payload[name])
        payload["min_buyers"] = to_int(self.min_buyers)
        payload["property_types"] = list(self.property_types)
        return payload


@dataclass
class Project:
    """Persisted project with its nested towers and units."""

    project_id: str
    title: str
    property_type: PropertyType | None
    status: ProjectStatus = ProjectStatus.PENDING
    min_buyers: int | None = None
    developer: str = ""
    location: str = ""
    property_types: list[PropertyType] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    brochure_url: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    towers: list[Tower] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def tower_count(self) -> int:
        return len(self.towers)

    @property
    def total_slots(self) -> int:
        return sum(len(tower.units) for tower in self.towers)
