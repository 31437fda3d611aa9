"""
Admin maintenance endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.session import get_db
from agency.controllers.project_controller import ProjectController
from agency.schemas.project import ProjectSyncRequest, ProjectSyncReport

router = APIRouter()


@router.post("/sync-projects", response_model=ProjectSyncReport)
async def sync_projects(
    sync_request: ProjectSyncRequest,
    db: AsyncSession = Depends(get_db),
) -> ProjectSyncReport:
    """
    Merge externally sourced project records.
    Returns per-record actions plus inserted/updated/skipped/failed counts.
    """
    controller = ProjectController(db)
    return await controller.sync_projects(sync_request.projects)
