"""In-memory document backend."""

from __future__ import annotations

import copy
import logging
import uuid
from contextlib import contextmanager
from dataclasses import fields
from datetime import datetime
from typing import Any, Iterator

from live_grouping.backends.base import MediaBackend
from live_grouping.backends.serialization import serialize_value, to_dict_shallow
from live_grouping.exceptions import (
    BackendError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ValidationError,
)
from live_grouping.models import (
    CompiledUnit,
    LocalFile,
    PaymentInfo,
    Project,
    ProjectStatus,
    PropertyType,
    Tower,
    UnitStatus,
    to_int,
)

logger = logging.getLogger(__name__)

UNIT_PATCH_FIELDS = frozenset(f.name for f in fields(CompiledUnit)) - {"unit_id"} | {"payment"}


class InMemoryBackend:
    """Document store for projects, towers and units.

    Every mutation runs in a transaction: the documents are snapshotted
    first and restored if anything fails, so a project is created with
    all of its towers and units or not at all.

    Parameters
    ----------
    media : MediaBackend | None
        Host for gallery images and brochures. Without one, file names
        are stored in place of URLs.
    """

    def __init__(self, media: MediaBackend | None = None) -> None:
        self.media = media
        self._projects: dict[str, dict[str, Any]] = {}
        self._towers: dict[str, dict[str, Any]] = {}
        self._units: dict[str, dict[str, Any]] = {}

    # Reads
    def list_projects(self) -> list[Project]:
        """All projects, newest first."""
        docs = sorted(self._projects.values(), key=lambda d: d.get("created_at") or "", reverse=True)
        return [self._build_project(doc) for doc in docs]

    def get_full_hierarchy(self, project_id: str) -> Project:
        """A project with its towers and units."""
        return self._build_project(self._project_doc(project_id))

    # Writes
    def create_project_with_hierarchy(
        self,
        project: dict[str, Any],
        towers: list[Tower],
        images: list[LocalFile],
        brochure: LocalFile | None,
    ) -> dict[str, str]:
        """Create a project with all of its towers and units atomically."""
        min_buyers = to_int(project.get("min_buyers"))
        if min_buyers is None or min_buyers < 1:
            raise BackendError("min_buyers must be a positive integer")

        image_urls = [self._upload(image) for image in images]
        brochure_url = self._upload(brochure) if brochure is not None else None

        project_id = self._new_id()
        project_doc = {
            "project_id": project_id,
            "title": project.get("title") or "",
            "developer": project.get("developer") or "",
            "location": project.get("location") or "",
            "type": serialize_value(project.get("type")),
            "property_types": serialize_value(project.get("property_types") or []),
            "status": ProjectStatus.PENDING.value,
            "min_buyers": min_buyers,
            "images": image_urls,
            "brochure_url": brochure_url,
            "details": serialize_value(project),
            "created_at": datetime.now().isoformat(),
        }

        tower_docs: dict[str, dict[str, Any]] = {}
        unit_docs: dict[str, dict[str, Any]] = {}
        for tower_position, tower in enumerate(towers):
            tower_id = self._new_id()
            tower_doc = to_dict_shallow(tower, exclude=("units",))
            tower_doc.update(tower_id=tower_id, project_id=project_id, position=tower_position)
            tower_docs[tower_id] = tower_doc
            for unit_position, unit in enumerate(tower.units):
                unit_id = self._new_id()
                unit_doc = to_dict_shallow(unit)
                unit_doc.update(
                    unit_id=unit_id,
                    tower_id=tower_id,
                    project_id=project_id,
                    position=unit_position,
                )
                unit_docs[unit_id] = unit_doc

        with self._transaction():
            self._projects[project_id] = project_doc
            self._towers.update(tower_docs)
            self._units.update(unit_docs)

        logger.info(
            "Created project %s with %d towers and %d units",
            project_id,
            len(tower_docs),
            len(unit_docs),
        )
        return {"id": project_id}

    def update_project_status(self, project_id: str, status: ProjectStatus | str) -> None:
        try:
            status = ProjectStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown project status {status!r}") from None
        doc = self._project_doc(project_id)
        with self._transaction():
            doc["status"] = status.value

    def delete_project(self, project_id: str) -> None:
        """Delete a project with its towers and units."""
        self._project_doc(project_id)
        with self._transaction():
            del self._projects[project_id]
            for tower_id in [k for k, d in self._towers.items() if d["project_id"] == project_id]:
                del self._towers[tower_id]
            for unit_id in [k for k, d in self._units.items() if d["project_id"] == project_id]:
                del self._units[unit_id]
        logger.info("Deleted project %s", project_id)

    def lock_unit(self, unit_id: str) -> None:
        """Lock an available unit."""
        doc = self._unit_doc(unit_id)
        if doc.get("status") != UnitStatus.AVAILABLE.value:
            raise InvalidEntityStateError(f"Unit {unit_id} is {doc.get('status')}, not available")
        with self._transaction():
            doc["status"] = UnitStatus.LOCKED.value

    def book_unit(self, unit_id: str, payment: PaymentInfo) -> None:
        """Book an available or locked unit and attach the payment."""
        doc = self._unit_doc(unit_id)
        if doc.get("status") == UnitStatus.BOOKED.value:
            raise InvalidEntityStateError(f"Unit {unit_id} is already booked")
        with self._transaction():
            doc["status"] = UnitStatus.BOOKED.value
            doc["booked_by"] = payment.user_name or None
            doc["payment_id"] = payment.payment_id or f"pay_{uuid.uuid4().hex[:16]}"
            doc["payment"] = {
                "amount": serialize_value(payment.amount),
                "currency": payment.currency,
            }

    def update_unit(self, unit_id: str, patch: dict[str, Any]) -> None:
        """Apply a field patch to a unit."""
        doc = self._unit_doc(unit_id)
        unknown = set(patch) - UNIT_PATCH_FIELDS
        if unknown:
            raise ValidationError(f"Unknown unit fields: {', '.join(sorted(unknown))}")
        values = dict(patch)
        if "status" in values:
            try:
                values["status"] = UnitStatus(values["status"])
            except ValueError:
                raise ValidationError(f"Unknown unit status {values['status']!r}") from None
        with self._transaction():
            doc.update(serialize_value(values))

    # Internals
    @contextmanager
    def _transaction(self) -> Iterator[None]:
        snapshot = copy.deepcopy((self._projects, self._towers, self._units))
        try:
            yield
            self._persist()
        except Exception:
            self._projects, self._towers, self._units = snapshot
            raise

    def _persist(self) -> None:
        """Hook called after each committed mutation."""

    def _upload(self, file: LocalFile) -> str:
        if self.media is None:
            return file.filename
        return self.media.upload_image(file)["url"]

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    def _project_doc(self, project_id: str) -> dict[str, Any]:
        try:
            return self._projects[project_id]
        except KeyError:
            raise EntityNotFoundError(f"Project {project_id} not found") from None

    def _unit_doc(self, unit_id: str) -> dict[str, Any]:
        try:
            return self._units[unit_id]
        except KeyError:
            raise EntityNotFoundError(f"Unit {unit_id} not found") from None

    def _build_project(self, doc: dict[str, Any]) -> Project:
        project_id = doc["project_id"]
        tower_docs = sorted(
            (d for d in self._towers.values() if d["project_id"] == project_id),
            key=lambda d: d["position"],
        )
        towers = []
        for tower_doc in tower_docs:
            unit_docs = sorted(
                (d for d in self._units.values() if d["tower_id"] == tower_doc["tower_id"]),
                key=lambda d: d["position"],
            )
            units = [CompiledUnit.from_document(d) for d in unit_docs]
            towers.append(Tower.from_document(tower_doc, units))

        created_at = doc.get("created_at")
        return Project(
            project_id=project_id,
            title=doc.get("title", ""),
            property_type=PropertyType(doc["type"]) if doc.get("type") else None,
            status=ProjectStatus(doc.get("status", ProjectStatus.PENDING)),
            min_buyers=doc.get("min_buyers"),
            developer=doc.get("developer", ""),
            location=doc.get("location", ""),
            property_types=[PropertyType(t) for t in doc.get("property_types", [])],
            images=list(doc.get("images", [])),
            brochure_url=doc.get("brochure_url"),
            details=copy.deepcopy(doc.get("details", {})),
            towers=towers,
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
