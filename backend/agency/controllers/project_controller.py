"""
Project controller.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.project_service import ProjectService
from agency.schemas.common import EntityId
from agency.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectListResponse,
    ProjectMutationResponse,
    ProjectSyncReport,
)


class ProjectController(BaseController):
    """Controller for project operations."""

    def __init__(self, session: AsyncSession):
        self.project_service = ProjectService(session)

    async def create_project(self, project_data: ProjectCreate) -> ProjectMutationResponse:
        """Create a new project."""
        project = await self.project_service.create_project(project_data)
        return ProjectMutationResponse(project=project)

    async def get_project(self, project_id: EntityId) -> Optional[ProjectResponse]:
        """Get project by ID."""
        return await self.project_service.get_project(project_id)

    async def list_projects(
        self,
        skip: int = 0,
        limit: int = 1000,
        include_content: bool = False,
    ) -> ProjectListResponse:
        """List projects."""
        projects, total = await self.project_service.list_projects(
            skip=skip,
            limit=limit,
            include_content=include_content,
        )
        return ProjectListResponse(projects=projects, total=total)

    async def update_project(
        self,
        project_id: EntityId,
        project_data: ProjectUpdate,
    ) -> Optional[ProjectMutationResponse]:
        """Update a project."""
        project = await self.project_service.update_project(project_id, project_data)
        if not project:
            return None
        return ProjectMutationResponse(project=project)

    async def delete_project(self, project_id: EntityId) -> bool:
        """Delete a project."""
        return await self.project_service.delete_project(project_id)

    async def sync_projects(self, records: Optional[List[Dict[str, Any]]]) -> ProjectSyncReport:
        """Bulk-merge externally sourced projects."""
        return await self.project_service.sync_projects(records)
