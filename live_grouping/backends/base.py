"""Interfaces of the persistence and media collaborators."""

from __future__ import annotations

from typing import Any, Protocol

from live_grouping.models import LocalFile, PaymentInfo, Project, ProjectStatus, Tower


class PersistenceBackend(Protocol):
    """Document store holding projects, towers and units."""

    def list_projects(self) -> list[Project]: ...

    def get_full_hierarchy(self, project_id: str) -> Project: ...

    def create_project_with_hierarchy(
        self,
        project: dict[str, Any],
        towers: list[Tower],
        images: list[LocalFile],
        brochure: LocalFile | None,
    ) -> dict[str, str]:
        """Create the project, its towers and units; all or nothing."""
        ...

    def update_project_status(self, project_id: str, status: ProjectStatus) -> None: ...

    def delete_project(self, project_id: str) -> None: ...

    def lock_unit(self, unit_id: str) -> None: ...

    def book_unit(self, unit_id: str, payment: PaymentInfo) -> None: ...

    def update_unit(self, unit_id: str, patch: dict[str, Any]) -> None: ...


class MediaBackend(Protocol):
    """Image/file host."""

    def upload_image(self, file: LocalFile) -> dict[str, str]:
        """Upload a file and return ``{"url": ...}``."""
        ...
