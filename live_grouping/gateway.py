"""Admin gateway for persisted projects and their units."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable

from live_grouping.backends.base import PersistenceBackend
from live_grouping.exceptions import AdminActionError, LiveGroupingError, UnitActionError
from live_grouping.logging import log_context
from live_grouping.models import PaymentInfo, Project, ProjectStatus, UnitStatus

logger = logging.getLogger(__name__)

ADMIN_BOOKING = PaymentInfo(amount=Decimal("50000"), currency="INR", user_name="Admin Booking")


class AdminGateway:
    """Project list and unit actions for administrators.

    Each action is a single write followed by a re-fetch of the affected
    read model. Failed actions leave the read model as it was. There is
    no optimistic locking: concurrent admins get last-write-wins.
    """

    def __init__(self, backend: PersistenceBackend) -> None:
        self.backend = backend
        self.projects: list[Project] = []
        self.hierarchy: Project | None = None

    def refresh_projects(self) -> list[Project]:
        self.projects = self.backend.list_projects()
        return self.projects

    def view_project(self, project_id: str) -> Project:
        """Load a project's full hierarchy for unit management."""
        self.hierarchy = self.backend.get_full_hierarchy(project_id)
        return self.hierarchy

    def back_to_list(self) -> None:
        self.hierarchy = None

    # Project actions
    def update_project_status(self, project_id: str, status: ProjectStatus | str) -> None:
        self._run("update status of", lambda: self.backend.update_project_status(project_id, status))
        self.refresh_projects()

    def delete_project(self, project_id: str) -> None:
        """Delete a project and all of its towers and units."""
        self._run("delete", lambda: self.backend.delete_project(project_id))
        if self.hierarchy is not None and self.hierarchy.project_id == project_id:
            self.hierarchy = None
        self.refresh_projects()

    # Unit actions
    def lock(self, unit_id: str) -> Project:
        return self._unit_action("lock", lambda: self.backend.lock_unit(unit_id))

    def book(self, unit_id: str, payment: PaymentInfo | None = None) -> Project:
        payment = payment or ADMIN_BOOKING
        return self._unit_action("book", lambda: self.backend.book_unit(unit_id, payment))

    def release(self, unit_id: str) -> Project:
        """Clear the booking and make the unit available again."""
        patch = {"status": UnitStatus.AVAILABLE, "booked_by": None, "payment_id": None, "payment": None}
        return self._unit_action("release", lambda: self.backend.update_unit(unit_id, patch))

    def edit_unit(self, unit_id: str, patch: dict[str, Any]) -> Project:
        return self._unit_action("update", lambda: self.backend.update_unit(unit_id, patch))

    def _unit_action(self, action: str, call: Callable[[], None]) -> Project:
        if self.hierarchy is None:
            raise UnitActionError(f"Failed to {action} unit: no project is open", action=action)
        self._run(action, call, subject="unit")
        logger.info(
            "Unit %s succeeded on project %s",
            action,
            self.hierarchy.project_id,
            extra=log_context(action=action, project_id=self.hierarchy.project_id),
        )
        return self.view_project(self.hierarchy.project_id)

    @staticmethod
    def _run(action: str, call: Callable[[], None], subject: str = "project") -> None:
        error_cls = UnitActionError if subject == "unit" else AdminActionError
        try:
            call()
        except LiveGroupingError as exc:
            logger.error("Failed to %s %s: %s", action, subject, exc)
            raise error_cls(f"Failed to {action} {subject}: {exc}", action=action) from exc
