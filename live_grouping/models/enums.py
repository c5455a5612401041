"""Enumeration types and display labels for the project hierarchy."""

from enum import Enum, IntEnum


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    BUNGALOW = "bungalow"
    TWIN_VILLA = "twin_villa"
    PLOT = "plot"
    MIXED_USE = "mixed_use"
    COMMERCIAL = "commercial"


class UnitStatus(str, Enum):
    AVAILABLE = "available"
    LOCKED = "locked"
    BOOKED = "booked"


class ProjectStatus(str, Enum):
    PENDING = "pending"
    LIVE = "live"
    CLOSED = "closed"


class WizardStep(IntEnum):
    TYPE = 1
    BASICS = 2
    HIERARCHY = 3
    CONFIGURATION = 4
    SUMMARY = 5


# Types whose units live on numbered floors of a tower
FLOOR_ORGANIZED_TYPES = frozenset({PropertyType.APARTMENT})

# Types whose non-custom units follow the global unit defaults
DEFAULTS_TRACKING_TYPES = frozenset(
    {PropertyType.APARTMENT, PropertyType.BUNGALOW, PropertyType.TWIN_VILLA}
)

# Types that can be components of a project (mixed_use is only a container)
COMPONENT_TYPES = tuple(t for t in PropertyType if t is not PropertyType.MIXED_USE)

UNIT_TYPE_LABELS = {
    PropertyType.APARTMENT: "Apartment",
    PropertyType.BUNGALOW: "Bungalow",
    PropertyType.TWIN_VILLA: "Twin Villa",
    PropertyType.PLOT: "Plot",
    PropertyType.COMMERCIAL: "Commercial",
}

PARENT_LABELS = {
    PropertyType.APARTMENT: "Tower",
    PropertyType.BUNGALOW: "Block",
    PropertyType.TWIN_VILLA: "Block",
    PropertyType.PLOT: "Sector",
    PropertyType.MIXED_USE: "Building",
    PropertyType.COMMERCIAL: "Block",
}

CHILD_LABELS = {
    PropertyType.APARTMENT: "Unit",
    PropertyType.BUNGALOW: "Bungalow",
    PropertyType.TWIN_VILLA: "Twin Villa",
    PropertyType.PLOT: "Plot",
    PropertyType.MIXED_USE: "Unit / Shop / Flat",
    PropertyType.COMMERCIAL: "Unit",
}


def parent_label(property_type: PropertyType | str) -> str:
    """Name of the container level (Tower, Block, Sector, ...)."""
    try:
        return PARENT_LABELS[PropertyType(property_type)]
    except ValueError:
        return "Group"


def child_label(property_type: PropertyType | str) -> str:
    """Name of the sellable level (Unit, Bungalow, Plot, ...)."""
    try:
        return CHILD_LABELS[PropertyType(property_type)]
    except ValueError:
        return "Item"
