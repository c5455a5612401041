"""Wizard controller for creating a project with its full hierarchy."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from live_grouping.backends.base import MediaBackend, PersistenceBackend
from live_grouping.compiler import HierarchyCompiler
from live_grouping.exceptions import (
    BackendError,
    InvalidEntityStateError,
    SubmissionError,
    ValidationError,
    WizardValidationError,
)
from live_grouping.generators import FloorMap, TowerPopulator, UnitRecordBuilder
from live_grouping.logging import log_context
from live_grouping.models import (
    COMPONENT_TYPES,
    GlobalUnitDefaults,
    LocalFile,
    Project,
    ProjectData,
    PropertyType,
    TowerDraft,
    Unit,
    WizardStep,
    parent_label,
    to_int,
)
from live_grouping.store import PropertyTypeStore

logger = logging.getLogger(__name__)


@dataclass
class ComponentSummary:
    """One row of the summary step's component breakdown."""

    property_type: PropertyType
    label: str
    tower_count: int
    unit_count: int


@dataclass
class WizardSummary:
    """Figures shown on the summary step."""

    components: list[ComponentSummary] = field(default_factory=list)
    total_slots: int = 0
    gallery_count: int = 0
    has_brochure: bool = False


class WizardController:
    """Linear five-step flow: Type, Basics, Hierarchy, Configuration, Summary.

    All state is transient until ``submit`` compiles it and hands it to
    the persistence backend in one create call.

    Parameters
    ----------
    backend : PersistenceBackend
        Receives the atomic create and serves the project list.
    media : MediaBackend | None
        Host for unit images picked during configuration.
    defaults : GlobalUnitDefaults | None
        Initial global unit defaults.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        media: MediaBackend | None = None,
        defaults: GlobalUnitDefaults | None = None,
    ) -> None:
        self.backend = backend
        self.media = media
        self.defaults = defaults or GlobalUnitDefaults()
        self.projects: list[Project] = []
        self.reset()

    def reset(self) -> None:
        """Discard all wizard state and return to the first step."""
        self.step = WizardStep.TYPE
        self.project = ProjectData()
        self.store = PropertyTypeStore()
        self.images: list[LocalFile] = []
        self.brochure: LocalFile | None = None
        self.last_error: str | None = None

    @property
    def builder(self) -> UnitRecordBuilder:
        return UnitRecordBuilder(self.defaults)

    @property
    def populator(self) -> TowerPopulator:
        return TowerPopulator(self.builder)

    # Step 1: type
    def choose_type(self, property_type: PropertyType | str) -> None:
        """Pick the project type; resets all per-type state.

        A single type becomes the only component; ``mixed_use`` starts
        with no components and they are toggled in step 3.
        """
        property_type = PropertyType(property_type)
        self.project.type = property_type
        self.store.clear()
        if property_type == PropertyType.MIXED_USE:
            self.project.property_types = []
        else:
            self.project.property_types = [property_type]
            self.store.select_type(property_type)

    def toggle_component(self, property_type: PropertyType | str, selected: bool) -> None:
        """Add or remove a component type of a mixed-use project."""
        property_type = PropertyType(property_type)
        if self.project.type != PropertyType.MIXED_USE:
            raise InvalidEntityStateError("Components can only be toggled on mixed-use projects")
        if property_type not in COMPONENT_TYPES:
            raise ValidationError(f"{property_type.value} cannot be a component")

        if selected:
            if property_type not in self.project.property_types:
                self.project.property_types.append(property_type)
            self.store.select_type(property_type)
        else:
            if property_type in self.project.property_types:
                self.project.property_types.remove(property_type)
            self.store.remove_type(property_type)

    # Step 2: basics
    def set_basics(self, **values: Any) -> None:
        self.project.update(**values)

    def set_location(self, address: str, latitude: Any, longitude: Any) -> None:
        """Apply a location picked on the map."""
        self.project.update(location=address, map_address=address, latitude=latitude, longitude=longitude)

    def attach_images(self, files: list[LocalFile]) -> None:
        self.images = list(files)

    def attach_brochure(self, file: LocalFile | None) -> None:
        self.brochure = file

    # Steps 3 and 4: hierarchy and configuration
    def update_defaults(self, **changes: Any) -> GlobalUnitDefaults:
        """Change the global unit defaults.

        Units that are still default follow the new values; custom units
        keep theirs.
        """
        try:
            self.defaults = dataclasses.replace(self.defaults, **changes)
        except TypeError as exc:
            raise ValidationError(str(exc)) from exc
        return self.defaults

    def update_config(self, property_type: PropertyType | str, name: str, value: Any) -> None:
        self.store.update_config(property_type, name, value)

    def add_tower(self, property_type: PropertyType | str) -> TowerDraft:
        return self.store.add_tower(property_type)

    def remove_tower(self, property_type: PropertyType | str, index: int) -> None:
        self.store.remove_tower(property_type, index)

    def update_tower(self, property_type: PropertyType | str, index: int, name: str, value: Any) -> None:
        self.store.update_tower_field(property_type, index, name, value)

    def populate_tower(self, property_type: PropertyType | str, index: int, confirm: bool = False) -> FloorMap:
        """Generate the tower's units from the defaults ("Reset to Defaults").

        Regenerating a tower that already has units discards them,
        customizations included, so it requires ``confirm=True``.
        """
        if self.store.has_units(property_type, index) and not confirm:
            raise InvalidEntityStateError(
                f"{parent_label(property_type)} {index + 1} already has units; "
                "resetting discards them, pass confirm=True"
            )
        return self.store.populate_tower(property_type, index, self.populator, self.project)

    def add_unit(self, property_type: PropertyType | str, index: int, floor: int) -> Unit:
        return self.store.add_unit(property_type, index, floor, self.builder)

    def remove_unit(self, property_type: PropertyType | str, index: int, floor: int, unit_index: int) -> Unit:
        return self.store.remove_unit(property_type, index, floor, unit_index)

    def update_unit(
        self,
        property_type: PropertyType | str,
        index: int,
        floor: int,
        unit_index: int,
        field_or_patch: str | dict[str, Any],
        value: Any = None,
    ) -> Unit:
        """Edit a unit; the unit becomes custom."""
        return self.store.update_unit(
            property_type, index, floor, unit_index, field_or_patch, value, builder=self.builder
        )

    def reset_unit(self, property_type: PropertyType | str, index: int, floor: int, unit_index: int) -> Unit:
        return self.store.reset_unit(property_type, index, floor, unit_index, self.builder)

    def copy_floor(self, property_type: PropertyType | str, index: int, from_floor: int, to_floor: int) -> list[Unit]:
        return self.store.copy_floor(property_type, index, from_floor, to_floor)

    def resolved_floor_map(self, property_type: PropertyType | str, index: int) -> FloorMap:
        """The tower's units as displayed, with defaults applied."""
        builder = self.builder
        return {
            floor: [builder.resolve(unit) for unit in units]
            for floor, units in sorted(self.store.floor_map(property_type, index).items())
        }

    # Navigation
    def validate_step(self, step: WizardStep | int) -> bool:
        """Whether the wizard may move forward from ``step``."""
        step = WizardStep(step)
        if step == WizardStep.TYPE:
            return self.project.type is not None

        if step == WizardStep.HIERARCHY:
            if not self.project.property_types:
                return False
            for property_type in self.project.property_types:
                if property_type == PropertyType.COMMERCIAL:
                    config = self.store.configs.get(PropertyType.COMMERCIAL)
                    if config is None or not config.total_units:
                        return False
                elif not self.store.towers_for(property_type):
                    return False
            return True

        # Basics, configuration and summary have no hard gate
        return True

    def next_step(self) -> WizardStep:
        """Advance one step if the current step validates."""
        if not self.validate_step(self.step):
            if self.step == WizardStep.TYPE:
                message = "Select a property type to continue"
            else:
                message = "Select at least one property type and configure its towers or total units"
            raise WizardValidationError(message, step=int(self.step))
        if self.step < WizardStep.SUMMARY:
            self.step = WizardStep(self.step + 1)
        return self.step

    def previous_step(self) -> WizardStep:
        if self.step > WizardStep.TYPE:
            self.step = WizardStep(self.step - 1)
        return self.step

    def summary(self) -> WizardSummary:
        """Component breakdown and totals for the summary step."""
        summary = WizardSummary(gallery_count=len(self.images), has_brochure=self.brochure is not None)
        for property_type in self.project.property_types:
            if property_type == PropertyType.COMMERCIAL:
                config = self.store.configs.get(PropertyType.COMMERCIAL)
                unit_count = (config.total_units or 0) if config else 0
                tower_count = 1 if unit_count else 0
            else:
                unit_count = self.store.unit_count(property_type)
                tower_count = len(self.store.towers_for(property_type))
            summary.components.append(
                ComponentSummary(
                    property_type=property_type,
                    label=parent_label(property_type),
                    tower_count=tower_count,
                    unit_count=unit_count,
                )
            )
            summary.total_slots += unit_count
        return summary

    # Submission
    def submit(self) -> str:
        """Compile the hierarchy and create the project ("Confirm & Generate").

        On success the wizard resets and the project list is refreshed.
        On failure the wizard state is kept so the admin can retry.

        Returns
        -------
        str
            Id of the created project.

        Raises
        ------
        WizardValidationError
            If ``min_buyers`` is missing or not a positive integer.
        SubmissionError
            If compilation input is invalid or the backend rejects the create.
        """
        if not self.project.min_buyers:
            raise WizardValidationError("Please specify Minimum Buyers", step=int(WizardStep.SUMMARY))
        try:
            min_buyers = to_int(self.project.min_buyers)
        except ValidationError as exc:
            raise WizardValidationError(str(exc), step=int(WizardStep.SUMMARY)) from exc
        if min_buyers is None or min_buyers < 1:
            raise WizardValidationError("Minimum Buyers must be a positive number", step=int(WizardStep.SUMMARY))

        try:
            towers = HierarchyCompiler(self.builder, self.media).compile(self.project, self.store)
            payload = self.project.sanitized()
            payload["property_configs"] = {t.value: c for t, c in self.store.configs.items()}
            result = self.backend.create_project_with_hierarchy(payload, towers, self.images, self.brochure)
        except (BackendError, ValidationError) as exc:
            logger.exception("Wizard submission failed")
            self.last_error = str(exc)
            raise SubmissionError(f"Failed to create project: {exc}") from exc

        project_id = result["id"]
        logger.info(
            "Project %s and complete hierarchy created", project_id, extra=log_context(project_id=project_id)
        )
        self.reset()
        self.refresh_projects()
        return project_id

    def refresh_projects(self) -> list[Project]:
        """Reload the project list; keeps the old list if the backend fails."""
        try:
            self.projects = self.backend.list_projects()
        except BackendError:
            logger.exception("Fetch projects failed")
        return self.projects
