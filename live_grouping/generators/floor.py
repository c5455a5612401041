"""Floor/tower generator: expands a tower row into floors of units."""

from __future__ import annotations

import logging

from live_grouping.exceptions import InvalidEntityStateError
from live_grouping.generators.unit import LandMetrics, UnitRecordBuilder
from live_grouping.models import (
    PropertyConfig,
    PropertyType,
    ProjectData,
    TowerDraft,
    Unit,
    UNIT_TYPE_LABELS,
    to_decimal,
)

logger = logging.getLogger(__name__)

FloorMap = dict[int, list[Unit]]

BASEMENT_FLOOR = -1
GROUND_FLOOR = 0


class TowerPopulator:
    """Generate the floor map for one tower.

    Apartments get one floor per storey (plus optional basement and
    ground floor). Bungalows, twin villas and plots are not floor
    organized and get a single synthetic floor 0. Commercial blocks are
    synthesized by the hierarchy compiler instead.
    """

    DEFAULT_UNITS_PER_FLOOR = 4
    DEFAULT_PLOT_ROWS = 5
    DEFAULT_PLOT_COLUMNS = 4
    DEFAULT_PLOT_AREA = 1200

    def __init__(self, builder: UnitRecordBuilder) -> None:
        self.builder = builder

    def populate(
        self,
        property_type: PropertyType,
        tower: TowerDraft,
        config: PropertyConfig | None = None,
        project: ProjectData | None = None,
    ) -> FloorMap:
        """Build a fresh floor map for the tower.

        Parameters
        ----------
        property_type : PropertyType
            Type the tower instantiates.
        tower : TowerDraft
            Tower row (floor count, units per floor, grid, ...).
        config : PropertyConfig | None
            Per-type configuration; supplies plot dimensions.
        project : ProjectData | None
            Project basics; supplies the plot rates and fallback area.

        Returns
        -------
        FloorMap
            Floor number to ordered list of units.
        """
        if property_type == PropertyType.APARTMENT:
            floor_map = self._populate_apartment(tower)
        elif property_type in (PropertyType.BUNGALOW, PropertyType.TWIN_VILLA):
            floor_map = self._populate_bungalows(property_type, tower)
        elif property_type == PropertyType.PLOT:
            floor_map = self._populate_plots(tower, config or PropertyConfig.for_type(property_type), project)
        else:
            raise InvalidEntityStateError(
                f"{property_type.value} towers are not generated floor by floor"
            )

        logger.debug(
            "Populated %s %r: %d floors, %d units",
            property_type.value,
            tower.name,
            len(floor_map),
            sum(len(units) for units in floor_map.values()),
        )
        return floor_map

    @staticmethod
    def copy_floor(floor_map: FloorMap, from_floor: int, to_floor: int) -> list[Unit]:
        """Deep-copy one floor's units onto another floor.

        Customization flags are copied; the new floor is independent of
        the source afterwards.
        """
        copied = [unit.copy() for unit in floor_map.get(from_floor, [])]
        floor_map[to_floor] = copied
        return copied

    def _floor_units(self, property_type: PropertyType, count: int) -> list[Unit]:
        return [self.builder.build(property_type, j) for j in range(count)]

    def _populate_apartment(self, tower: TowerDraft) -> FloorMap:
        units_per_floor = tower.units_per_floor or self.DEFAULT_UNITS_PER_FLOOR
        floors = tower.floors or 0

        floor_map: FloorMap = {}
        if tower.has_basement:
            floor_map[BASEMENT_FLOOR] = self._floor_units(PropertyType.APARTMENT, units_per_floor)
        if tower.has_ground_floor:
            floor_map[GROUND_FLOOR] = self._floor_units(PropertyType.APARTMENT, units_per_floor)
        for floor in range(1, floors + 1):
            floor_map[floor] = self._floor_units(PropertyType.APARTMENT, units_per_floor)
        return floor_map

    def _populate_bungalows(self, property_type: PropertyType, tower: TowerDraft) -> FloorMap:
        total = tower.total_bungalows or 1
        unit_type = tower.bungalow_type or UNIT_TYPE_LABELS[property_type]
        return {
            GROUND_FLOOR: [
                self.builder.build(property_type, k, unit_type=unit_type) for k in range(total)
            ]
        }

    def _populate_plots(
        self,
        tower: TowerDraft,
        config: PropertyConfig,
        project: ProjectData | None,
    ) -> FloorMap:
        rows = tower.layout_rows or self.DEFAULT_PLOT_ROWS
        columns = tower.layout_columns or self.DEFAULT_PLOT_COLUMNS
        project = project or ProjectData()

        land = LandMetrics(
            plot_width=config.plot_size_width or to_decimal(30),
            plot_depth=config.plot_size_depth or to_decimal(40),
            area=to_decimal(project.area) or to_decimal(self.DEFAULT_PLOT_AREA),
            price_per_sqft=to_decimal(project.regular_price_per_sqft) or to_decimal(0),
            discount_price_per_sqft=to_decimal(project.group_price_per_sqft),
        )
        return {
            GROUND_FLOOR: [
                self.builder.build(PropertyType.PLOT, k, land=land) for k in range(rows * columns)
            ]
        }
