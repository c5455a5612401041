"""Domain models for the project hierarchy."""

from live_grouping.models.base import LocalFile, PaymentInfo, is_blank, to_decimal, to_int
from live_grouping.models.enums import (
    COMPONENT_TYPES,
    DEFAULTS_TRACKING_TYPES,
    FLOOR_ORGANIZED_TYPES,
    UNIT_TYPE_LABELS,
    ProjectStatus,
    PropertyType,
    UnitStatus,
    WizardStep,
    child_label,
    parent_label,
)
from live_grouping.models.hierarchy import GlobalUnitDefaults, PropertyConfig, Tower, TowerDraft
from live_grouping.models.project import Project, ProjectData
from live_grouping.models.unit import (
    CommercialPayload,
    CompiledUnit,
    PlotPayload,
    ResidentialPayload,
    Unit,
    UnitPayload,
    payload_for,
)

__all__ = [
    "COMPONENT_TYPES",
    "DEFAULTS_TRACKING_TYPES",
    "FLOOR_ORGANIZED_TYPES",
    "UNIT_TYPE_LABELS",
    "CommercialPayload",
    "CompiledUnit",
    "GlobalUnitDefaults",
    "LocalFile",
    "PaymentInfo",
    "PlotPayload",
    "Project",
    "ProjectData",
    "ProjectStatus",
    "PropertyConfig",
    "PropertyType",
    "ResidentialPayload",
    "Tower",
    "TowerDraft",
    "Unit",
    "UnitPayload",
    "UnitStatus",
    "WizardStep",
    "child_label",
    "is_blank",
    "parent_label",
    "payload_for",
    "to_decimal",
    "to_int",
]
