"""Per-type configuration store for the wizard's hierarchy state."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from typing import Any, Iterator

from live_grouping.exceptions import EntityNotFoundError, InvalidEntityStateError, ValidationError
from live_grouping.generators.floor import FloorMap, TowerPopulator
from live_grouping.generators.unit import UnitRecordBuilder, flat_letter, floor_slot_label
from live_grouping.models import (
    ProjectData,
    PropertyConfig,
    PropertyType,
    TowerDraft,
    Unit,
    parent_label,
    to_int,
)

logger = logging.getLogger(__name__)

TowerKey = tuple[PropertyType, int]


@dataclass
class PropertyTypeStore:
    """In-memory store of per-type configs, towers and their units.

    Units are kept in floor maps addressed by ``(type, tower index)``;
    edits look the unit up by key and mutate it in place.
    """

    configs: dict[PropertyType, PropertyConfig] = field(default_factory=dict)
    towers: dict[PropertyType, list[TowerDraft]] = field(default_factory=dict)
    _floor_maps: dict[TowerKey, FloorMap] = field(default_factory=dict)

    @property
    def selected_types(self) -> list[PropertyType]:
        """Types in the order they were selected."""
        return list(self.configs)

    def select_type(self, property_type: PropertyType) -> bool:
        """Initialize a type with one default tower.

        Re-selecting a type that already has state is a no-op.

        Returns
        -------
        bool
            True if the type was initialized.
        """
        property_type = PropertyType(property_type)
        if property_type == PropertyType.MIXED_USE:
            raise InvalidEntityStateError("mixed_use is a project type, not a component")
        if property_type in self.configs:
            return False

        self.configs[property_type] = PropertyConfig.for_type(property_type)
        # Commercial blocks are synthesized at compile time
        self.towers[property_type] = (
            [] if property_type == PropertyType.COMMERCIAL else [TowerDraft.first_for_type(property_type)]
        )
        logger.info("Selected property type %s", property_type.value)
        return True

    def remove_type(self, property_type: PropertyType) -> None:
        """Remove a type's config, towers and units together."""
        property_type = PropertyType(property_type)
        self.configs.pop(property_type, None)
        self.towers.pop(property_type, None)
        for key in [k for k in self._floor_maps if k[0] == property_type]:
            del self._floor_maps[key]
        logger.info("Removed property type %s", property_type.value)

    deselect_type = remove_type

    def clear(self) -> None:
        """Drop all per-type state."""
        self.configs.clear()
        self.towers.clear()
        self._floor_maps.clear()

    # Config
    def config(self, property_type: PropertyType) -> PropertyConfig:
        """Get the configuration of a selected type."""
        try:
            return self.configs[PropertyType(property_type)]
        except KeyError:
            raise EntityNotFoundError(f"Property type {property_type} is not selected") from None

    def update_config(self, property_type: PropertyType, name: str, value: Any) -> None:
        """Set one layout parameter of a selected type."""
        config = self.config(property_type)
        if name not in {f.name for f in fields(config)}:
            raise ValidationError(f"Unknown configuration field {name!r}")
        setattr(config, name, config.coerce(name, value))

    # Towers
    def towers_for(self, property_type: PropertyType) -> list[TowerDraft]:
        """Towers of a type (empty if the type is not selected)."""
        return self.towers.get(PropertyType(property_type), [])

    def tower(self, property_type: PropertyType, index: int) -> TowerDraft:
        towers = self.towers_for(property_type)
        if not 0 <= index < len(towers):
            raise EntityNotFoundError(f"No tower {index} for {property_type}")
        return towers[index]

    def add_tower(self, property_type: PropertyType) -> TowerDraft:
        """Append a tower row named after the next letter."""
        property_type = PropertyType(property_type)
        if property_type == PropertyType.COMMERCIAL:
            raise InvalidEntityStateError("Commercial blocks are generated from total_units")
        self.config(property_type)
        towers = self.towers.setdefault(property_type, [])
        tower = TowerDraft(
            name=f"{parent_label(property_type)} {flat_letter(len(towers))}",
            floors=10,
            units_per_floor=4,
        )
        towers.append(tower)
        return tower

    def remove_tower(self, property_type: PropertyType, index: int) -> None:
        """Remove a tower row and its units; later towers shift down."""
        property_type = PropertyType(property_type)
        towers = self.towers_for(property_type)
        self.tower(property_type, index)
        del towers[index]

        self._floor_maps.pop((property_type, index), None)
        for old_index in range(index + 1, len(towers) + 1):
            floor_map = self._floor_maps.pop((property_type, old_index), None)
            if floor_map is not None:
                self._floor_maps[(property_type, old_index - 1)] = floor_map

    def update_tower_field(self, property_type: PropertyType, index: int, name: str, value: Any) -> None:
        """Set one tower field; integer fields accept blanks as cleared.

        ``total_plots`` sizes a plot sector's grid: rows are derived from
        the count and the current column count. Names that are not tower
        fields are kept as-is in ``tower.extras``.
        """
        property_type = PropertyType(property_type)
        tower = self.tower(property_type, index)
        if name == "total_plots":
            total = to_int(value)
            tower.extras[name] = total
            if total:
                columns = tower.layout_columns or TowerPopulator.DEFAULT_PLOT_COLUMNS
                tower.layout_columns = columns
                tower.layout_rows = math.ceil(total / columns)
        elif name in TowerDraft.INTEGER_FIELDS:
            setattr(tower, name, to_int(value))
        elif name != "extras" and name in {f.name for f in fields(tower)}:
            setattr(tower, name, value)
        else:
            tower.extras[name] = value
        self._floor_maps.setdefault((property_type, index), {})

    # Floors and units
    def floor_map(self, property_type: PropertyType, index: int) -> FloorMap:
        """The floor map of a tower, created empty if absent."""
        property_type = PropertyType(property_type)
        self.tower(property_type, index)
        return self._floor_maps.setdefault((property_type, index), {})

    def has_units(self, property_type: PropertyType, index: int) -> bool:
        floor_map = self._floor_maps.get((PropertyType(property_type), index), {})
        return any(floor_map.values())

    def populate_tower(
        self,
        property_type: PropertyType,
        index: int,
        populator: TowerPopulator,
        project: ProjectData | None = None,
    ) -> FloorMap:
        """Replace the tower's floor map with freshly generated units."""
        property_type = PropertyType(property_type)
        tower = self.tower(property_type, index)
        floor_map = populator.populate(property_type, tower, self.config(property_type), project)
        self._floor_maps[(property_type, index)] = floor_map
        return floor_map

    def units_on(self, property_type: PropertyType, index: int, floor: int) -> list[Unit]:
        floor_map = self.floor_map(property_type, index)
        if floor not in floor_map:
            raise EntityNotFoundError(f"No floor {floor} in tower {index} of {property_type}")
        return floor_map[floor]

    def unit(self, property_type: PropertyType, index: int, floor: int, unit_index: int) -> Unit:
        units = self.units_on(property_type, index, floor)
        if not 0 <= unit_index < len(units):
            raise EntityNotFoundError(f"No unit {unit_index} on floor {floor} of tower {index}")
        return units[unit_index]

    def add_unit(
        self,
        property_type: PropertyType,
        index: int,
        floor: int,
        builder: UnitRecordBuilder,
    ) -> Unit:
        """Append a default unit to a floor."""
        property_type = PropertyType(property_type)
        units = self.floor_map(property_type, index).setdefault(floor, [])
        position = len(units)
        unit = builder.build(property_type, position, label=floor_slot_label(property_type, position))
        units.append(unit)
        return unit

    def remove_unit(self, property_type: PropertyType, index: int, floor: int, unit_index: int) -> Unit:
        self.unit(property_type, index, floor, unit_index)
        return self.units_on(property_type, index, floor).pop(unit_index)

    def update_unit(
        self,
        property_type: PropertyType,
        index: int,
        floor: int,
        unit_index: int,
        field_or_patch: str | dict[str, Any],
        value: Any = None,
        builder: UnitRecordBuilder | None = None,
    ) -> Unit:
        """Edit a unit and re-derive its area and price.

        Any edit marks the unit custom. When a builder is given, a
        default unit first takes the values it currently displays, so
        customizing freezes what the admin saw.
        """
        unit = self.unit(property_type, index, floor, unit_index)
        patch = field_or_patch if isinstance(field_or_patch, dict) else {field_or_patch: value}

        if builder is not None and builder.tracks_defaults(unit):
            unit = builder.resolve(unit)
            self.units_on(property_type, index, floor)[unit_index] = unit

        for name, new_value in patch.items():
            unit.set_field(name, new_value)
        unit.is_custom = True
        unit.derive()
        return unit

    def reset_unit(
        self,
        property_type: PropertyType,
        index: int,
        floor: int,
        unit_index: int,
        builder: UnitRecordBuilder,
    ) -> Unit:
        """Return a unit to the global defaults, with its positional label."""
        unit = self.unit(property_type, index, floor, unit_index)
        builder.reset(unit, unit_index)
        return unit

    def copy_floor(self, property_type: PropertyType, index: int, from_floor: int, to_floor: int) -> list[Unit]:
        """Duplicate one floor's plan onto another floor of the same tower."""
        return TowerPopulator.copy_floor(self.floor_map(property_type, index), from_floor, to_floor)

    def iter_units(self, property_type: PropertyType, index: int) -> Iterator[tuple[int, Unit]]:
        """Yield ``(floor, unit)`` pairs, floors ascending."""
        floor_map = self._floor_maps.get((PropertyType(property_type), index), {})
        for floor in sorted(floor_map):
            for unit in floor_map[floor]:
                yield floor, unit

    def unit_count(self, property_type: PropertyType) -> int:
        """Units across all towers of a type."""
        property_type = PropertyType(property_type)
        return sum(
            len(units)
            for (key_type, _), floor_map in self._floor_maps.items()
            if key_type == property_type
            for units in floor_map.values()
        )
