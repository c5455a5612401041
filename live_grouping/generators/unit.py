"""Unit record builder: one draft unit with its derived price."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from live_grouping.models import (
    DEFAULTS_TRACKING_TYPES,
    UNIT_TYPE_LABELS,
    CommercialPayload,
    GlobalUnitDefaults,
    PlotPayload,
    PropertyType,
    ResidentialPayload,
    Unit,
    payload_for,
)

logger = logging.getLogger(__name__)

SEQUENCE_PREFIXES = {
    PropertyType.BUNGALOW: "B",
    PropertyType.TWIN_VILLA: "TV",
    PropertyType.PLOT: "P",
    PropertyType.COMMERCIAL: "C",
}


def flat_letter(index: int) -> str:
    """Spreadsheet-style letters: 0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def unit_label(property_type: PropertyType, index: int) -> str:
    """Label for the unit at a zero-based position.

    Flats get a letter suffix (``Flat A``); bungalows, twin villas,
    plots and commercial units get a prefixed sequence (``B-1``,
    ``TV-1``, ``P-1``, ``C-1``).
    """
    prefix = SEQUENCE_PREFIXES.get(property_type)
    if prefix is None:
        return f"Flat {flat_letter(index)}"
    return f"{prefix}-{index + 1}"


def floor_slot_label(property_type: PropertyType, index: int) -> str:
    """Label for a unit added by hand to a floor (``Shop 1`` or ``Flat A``)."""
    if property_type == PropertyType.COMMERCIAL:
        return f"Shop {index + 1}"
    return f"Flat {flat_letter(index)}"


@dataclass(frozen=True)
class LandMetrics:
    """Land-type figures that replace the global defaults for a unit."""

    plot_width: Decimal | None
    plot_depth: Decimal | None
    area: Decimal | None
    price_per_sqft: Decimal | None
    discount_price_per_sqft: Decimal | None = None


class UnitRecordBuilder:
    """Build draft units from the global unit defaults.

    Parameters
    ----------
    defaults : GlobalUnitDefaults
        Template for area, carpet area and rates.
    """

    def __init__(self, defaults: GlobalUnitDefaults) -> None:
        self.defaults = defaults

    def build(
        self,
        property_type: PropertyType,
        index: int,
        label: str | None = None,
        unit_type: str | None = None,
        land: LandMetrics | None = None,
    ) -> Unit:
        """Build one unit at a zero-based position.

        Parameters
        ----------
        property_type : PropertyType
            Type tag; selects the payload variant.
        index : int
            Position of the unit within its floor or sequence.
        label : str | None
            Override for the generated unit number.
        unit_type : str | None
            Override for the unit type label.
        land : LandMetrics | None
            Plot or frontage metrics; when given they are used instead of
            the global defaults.

        Returns
        -------
        Unit
            Unit with its price derived.
        """
        number = label or unit_label(property_type, index)
        unit = Unit(
            unit_number=number,
            property_type=property_type,
            unit_type=unit_type or self._default_unit_type(property_type),
            payload=payload_for(property_type),
            flat_label=number if number.startswith(("Flat", "Shop")) else None,
        )
        if land is not None:
            self._apply_land(unit, land)
        else:
            self._apply_defaults(unit)
        unit.derive()
        return unit

    def tracks_defaults(self, unit: Unit) -> bool:
        """Whether the unit's values follow the global defaults."""
        return not unit.is_custom and unit.property_type in DEFAULTS_TRACKING_TYPES

    def resolve(self, unit: Unit) -> Unit:
        """Return the unit as displayed and compiled.

        Default units of tracking types take their figures from the
        current defaults; custom units and land units are returned as
        stored.
        """
        if not self.tracks_defaults(unit):
            return unit
        resolved = unit.copy()
        self._apply_defaults(resolved)
        resolved.derive()
        return resolved

    def reset(self, unit: Unit, index: int) -> None:
        """Return a customized unit to the defaults, in place.

        The unit type and the label at ``index`` are restored along with
        the figures.
        """
        if unit.property_type == PropertyType.COMMERCIAL:
            number = floor_slot_label(unit.property_type, index)
        else:
            number = unit_label(unit.property_type, index)
        unit.is_custom = False
        unit.unit_number = number
        unit.flat_label = number if number.startswith(("Flat", "Shop")) else None
        unit.unit_type = self._default_unit_type(unit.property_type)
        if unit.property_type in DEFAULTS_TRACKING_TYPES:
            self._apply_defaults(unit)
        unit.derive()

    def _default_unit_type(self, property_type: PropertyType) -> str:
        if property_type == PropertyType.APARTMENT:
            return self.defaults.unit_type
        return UNIT_TYPE_LABELS.get(property_type, self.defaults.unit_type)

    def _apply_defaults(self, unit: Unit) -> None:
        unit.area = self.defaults.area
        unit.price_per_sqft = self.defaults.base_rate
        unit.discount_price_per_sqft = self.defaults.discount_rate
        if isinstance(unit.payload, ResidentialPayload):
            unit.payload.carpet_area = self.defaults.carpet_area

    def _apply_land(self, unit: Unit, land: LandMetrics) -> None:
        unit.area = land.area
        unit.price_per_sqft = land.price_per_sqft
        unit.discount_price_per_sqft = land.discount_price_per_sqft
        if isinstance(unit.payload, (PlotPayload, CommercialPayload)):
            unit.payload.plot_width = land.plot_width
            unit.payload.plot_depth = land.plot_depth
        else:
            logger.debug("Ignoring land metrics for %s unit", unit.property_type.value)
