"""
Public page endpoints. Only published projects are visible.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.session import get_db
from agency.controllers.public_controller import PublicController

router = APIRouter()


@router.get("/projects/{project_id}/brand-page", response_class=HTMLResponse)
async def get_brand_page(
    project_id: str,
    db: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    """Rendered brand page of a published project."""
    controller = PublicController(db)
    return HTMLResponse(await controller.get_brand_page(project_id))


@router.get("/projects/{project_id}/page", response_class=HTMLResponse)
async def get_project_page(
    project_id: str,
    db: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    """Rendered content blocks of a published project."""
    controller = PublicController(db)
    return HTMLResponse(await controller.get_project_page(project_id))
