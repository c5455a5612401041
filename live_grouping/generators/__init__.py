"""Generators for units, tower floor maps and sample project data."""

from live_grouping.generators.floor import FloorMap, TowerPopulator
from live_grouping.generators.sample import SampleProjectGenerator
from live_grouping.generators.unit import (
    LandMetrics,
    UnitRecordBuilder,
    flat_letter,
    floor_slot_label,
    unit_label,
)

__all__ = [
    "FloorMap",
    "LandMetrics",
    "SampleProjectGenerator",
    "TowerPopulator",
    "UnitRecordBuilder",
    "flat_letter",
    "floor_slot_label",
    "unit_label",
]
