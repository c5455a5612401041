"""Hierarchy compiler: flattens wizard state into towers for submission."""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from live_grouping.backends.base import MediaBackend
from live_grouping.generators.unit import LandMetrics, UnitRecordBuilder
from live_grouping.models import (
    UNIT_TYPE_LABELS,
    CommercialPayload,
    CompiledUnit,
    PlotPayload,
    ProjectData,
    PropertyConfig,
    PropertyType,
    ResidentialPayload,
    Tower,
    TowerDraft,
    Unit,
    UnitStatus,
    to_decimal,
)
from live_grouping.store import PropertyTypeStore

logger = logging.getLogger(__name__)

COMMERCIAL_TOWER_NAME = "Commercial Block"
GENERIC_UNIT_TYPES = frozenset({"", "Flat"})


class HierarchyCompiler:
    """Compile the per-type store into the tower list sent on submission.

    Parameters
    ----------
    builder : UnitRecordBuilder
        Carries the current global defaults; default units are compiled
        with the values they display.
    media : MediaBackend | None
        Host for unit images picked in the wizard.
    """

    def __init__(self, builder: UnitRecordBuilder, media: MediaBackend | None = None) -> None:
        self.builder = builder
        self.media = media

    def compile(self, project: ProjectData, store: PropertyTypeStore) -> list[Tower]:
        """Compile every selected type into towers.

        The commercial block, when selected, always comes first; the
        remaining towers follow in type selection order.
        """
        towers: list[Tower] = []
        types = [PropertyType(t) for t in project.property_types]

        if PropertyType.COMMERCIAL in types:
            config = store.configs.get(PropertyType.COMMERCIAL, PropertyConfig.for_type(PropertyType.COMMERCIAL))
            towers.append(self._compile_commercial(project, config))

        for property_type in types:
            if property_type == PropertyType.COMMERCIAL:
                continue
            for index, tower in enumerate(store.towers_for(property_type)):
                towers.append(self._compile_tower(property_type, index, tower, store))

        logger.info(
            "Compiled %d towers with %d units",
            len(towers),
            sum(len(t.units) for t in towers),
        )
        return towers

    def _compile_commercial(self, project: ProjectData, config: PropertyConfig) -> Tower:
        total_units = config.total_units or 0
        columns = config.layout_columns or 1
        width = config.plot_size_width
        depth = config.plot_size_depth
        area = width * depth if width and depth else Decimal("0")
        land = LandMetrics(
            plot_width=width or None,
            plot_depth=depth or None,
            area=area,
            price_per_sqft=to_decimal(project.regular_price_per_sqft) or Decimal("0"),
        )

        units = []
        for i in range(total_units):
            unit = self.builder.build(PropertyType.COMMERCIAL, i, land=land)
            units.append(self._to_compiled(unit, floor=0, unit_type=unit.unit_type, image_url=None))

        return Tower(
            tower_name=COMMERCIAL_TOWER_NAME,
            property_type=PropertyType.COMMERCIAL,
            total_floors=config.commercial_floor_count or 1,
            layout_columns=columns,
            layout_rows=math.ceil(total_units / columns),
            units=units,
        )

    def _compile_tower(
        self,
        property_type: PropertyType,
        index: int,
        tower: TowerDraft,
        store: PropertyTypeStore,
    ) -> Tower:
        units = []
        for floor, draft in store.iter_units(property_type, index):
            unit = self.builder.resolve(draft)
            unit_type = unit.unit_type
            if not unit_type or unit_type in GENERIC_UNIT_TYPES:
                unit_type = UNIT_TYPE_LABELS.get(property_type, "Bungalow")
            image_url = self._upload_image(draft)
            units.append(self._to_compiled(unit, floor=floor, unit_type=unit_type, image_url=image_url))

        return Tower(
            tower_name=tower.name or f"{property_type.value.capitalize()} Block {index + 1}",
            property_type=property_type,
            total_floors=tower.floors or 0,
            layout_columns=tower.layout_columns or None,
            layout_rows=tower.layout_rows or None,
            units=units,
        )

    def _upload_image(self, unit: Unit) -> str | None:
        """Upload a picked image; on failure keep the previous URL."""
        if unit.unit_image_file is None:
            return unit.unit_image_url
        if self.media is None:
            logger.warning("No media backend; image for %s not uploaded", unit.unit_number)
            return unit.unit_image_url
        try:
            return self.media.upload_image(unit.unit_image_file)["url"]
        except Exception:
            logger.exception("Unit image upload failed for %s", unit.unit_number)
            return unit.unit_image_url

    @staticmethod
    def _to_compiled(unit: Unit, floor: int, unit_type: str, image_url: str | None) -> CompiledUnit:
        compiled = CompiledUnit(
            unit_number=unit.unit_number,
            unit_type=unit_type,
            floor_number=floor,
            area=unit.area,
            price=unit.price,
            price_per_sqft=unit.price_per_sqft,
            discount_price_per_sqft=unit.discount_price_per_sqft,
            flat_label=unit.flat_label,
            unit_image_url=image_url,
            is_custom=unit.is_custom,
            status=UnitStatus.AVAILABLE,
        )
        payload = unit.payload
        if isinstance(payload, ResidentialPayload):
            compiled.carpet_area = payload.carpet_area
            compiled.super_built_up_area = payload.super_built_up_area
        elif isinstance(payload, (PlotPayload, CommercialPayload)):
            compiled.plot_width = payload.plot_width
            compiled.plot_depth = payload.plot_depth
        return compiled
