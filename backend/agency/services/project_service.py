"""
Project service with business logic.
"""

import uuid
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.db.repositories.project_repository import ProjectRepository
from agency.models.project import Project, ProjectStatus
from agency.schemas.common import normalize_id, EntityId
from agency.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectSyncReport,
    ProjectSyncResult,
    SYNCABLE_PROJECT_FIELDS,
    HEAVY_PROJECT_FIELDS,
)
from agency.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from agency.core.logging import get_logger

logger = get_logger(__name__)

LINK_FIELDS = ("linked_account_id", "linked_proposal_id")
LIST_FIELDS = ("page_blocks", "tasks", "services")


def _to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON-mode schema dump into column values."""
    for key in LINK_FIELDS:
        if key in data:
            data[key] = normalize_id(data[key])
    if data.get("status") is not None:
        data["status"] = ProjectStatus(data["status"])
    return data


class ProjectService(BaseService):
    """Service for project operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.project_repo = ProjectRepository(session)

    def _to_response(self, project: Project, include_content: bool = True) -> ProjectResponse:
        data = {column.name: getattr(project, column.name) for column in Project.__table__.columns}
        for key in LIST_FIELDS:
            if data.get(key) is None:
                data[key] = []
        if not include_content:
            # Narrow projection: heavy payloads come back empty
            for key in HEAVY_PROJECT_FIELDS:
                data[key] = [] if key in LIST_FIELDS else None
        return ProjectResponse.model_validate(data)

    async def create_project(self, project_data: ProjectCreate) -> ProjectResponse:
        """Create a project, keeping a client-supplied identifier when given."""
        project_dict = _to_columns(project_data.model_dump(mode="json"))
        project_id = normalize_id(project_dict.pop("id", None)) or uuid.uuid4().hex

        if await self.project_repo.get(project_id):
            raise ConflictError(f"Project {project_id} already exists", details={"id": project_id})

        project = await self.project_repo.create(id=project_id, **project_dict)
        await self.session.commit()
        logger.info("Project created", extra={"project_id": project.id})
        return self._to_response(project)

    async def get_project(self, project_id: EntityId) -> Optional[ProjectResponse]:
        """Get project by ID."""
        project = await self.project_repo.get(project_id)
        if not project:
            return None
        return self._to_response(project)

    async def list_projects(
        self,
        skip: int = 0,
        limit: int = 1000,
        include_content: bool = False,
    ) -> tuple[List[ProjectResponse], int]:
        """List projects; heavy payloads are included only on request."""
        projects = await self.project_repo.list_ordered(skip=skip, limit=limit)
        return [self._to_response(p, include_content) for p in projects], len(projects)

    async def update_project(
        self,
        project_id: EntityId,
        project_data: ProjectUpdate,
    ) -> Optional[ProjectResponse]:
        """Update a project with the fields present in the request."""
        project = await self.project_repo.get(project_id)
        if not project:
            return None

        update_dict = _to_columns(project_data.model_dump(mode="json", exclude_unset=True))
        updated = await self.project_repo.update(project.id, **update_dict)
        await self.session.commit()
        return self._to_response(updated)

    async def delete_project(self, project_id: EntityId) -> bool:
        """Delete a project."""
        deleted = await self.project_repo.delete(project_id)
        await self.session.commit()
        return deleted

    async def get_published_project(self, project_id: EntityId) -> Project:
        """Get a project whose page is public; unpublished projects do not exist publicly."""
        project = await self.project_repo.get(project_id)
        if not project or not project.is_page_published:
            raise NotFoundError("Page not found")
        return project

    async def sync_projects(self, records: Optional[List[Dict[str, Any]]]) -> ProjectSyncReport:
        """
        Merge externally sourced project records into the store.

        Each record is handled on its own: records without an identifier
        are skipped silently, demo records are skipped with a log entry,
        known identifiers get their allow-listed fields merged and new ones
        are inserted. A record that fails validation is reported as failed
        and the batch continues.

        Args:
            records: Raw project-like dicts

        Returns:
            ProjectSyncReport with counts and a per-record action log
        """
        if not records:
            raise InvalidInputError("No projects provided")

        report = ProjectSyncReport(total=len(records))

        for record in records:
            raw_id = record.get("id") if isinstance(record, dict) else None
            if raw_id is None or raw_id == "":
                report.skipped += 1
                continue

            record_id = normalize_id(raw_id)
            if record_id.startswith("demo-"):
                report.skipped += 1
                report.results.append(ProjectSyncResult(id=record_id, action="skipped (demo)"))
                continue

            try:
                existing = await self.project_repo.get(record_id)
                if existing:
                    fields = {
                        key: record[key]
                        for key in SYNCABLE_PROJECT_FIELDS
                        if key in record and record[key] is not None
                    }
                    changes = _to_columns(
                        ProjectUpdate.model_validate(fields).model_dump(mode="json", exclude_unset=True)
                    )
                    await self.project_repo.update(record_id, **changes)
                    report.updated += 1
                    report.results.append(ProjectSyncResult(id=record_id, action="updated"))
                else:
                    values = _to_columns(ProjectCreate.model_validate(record).model_dump(mode="json"))
                    values["id"] = record_id
                    await self.project_repo.create(**values)
                    report.inserted += 1
                    report.results.append(ProjectSyncResult(id=record_id, action="inserted"))
            except ValidationError as e:
                logger.warning(
                    "Project sync record failed",
                    extra={"project_id": record_id, "error": str(e)},
                )
                report.failed += 1
                report.results.append(ProjectSyncResult(id=record_id, action="failed"))

        await self.session.commit()
        report.synced = report.inserted + report.updated
        logger.info(
            "Project sync finished",
            extra={
                "synced": report.synced,
                "skipped": report.skipped,
                "failed": report.failed,
                "total": report.total,
            },
        )
        return report
