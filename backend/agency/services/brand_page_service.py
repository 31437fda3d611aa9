"""
Public page service: renders published brand pages and project pages.
"""

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.services.project_service import ProjectService
from agency.brand_pages.templates import render_brand_page
from agency.brand_pages.blocks import render_project_page
from agency.schemas.brand_page import BrandPage
from agency.schemas.common import EntityId
from agency.core.exceptions import NotFoundError
from agency.core.logging import get_logger

logger = get_logger(__name__)


class BrandPageService(BaseService):
    """Service for public page rendering."""

    def __init__(self, session: AsyncSession):
        self.project_service = ProjectService(session)

    async def render_brand_page(self, project_id: EntityId) -> str:
        """Render the brand page embedded in a published project."""
        project = await self.project_service.get_published_project(project_id)
        try:
            page = BrandPage.from_brand_data(project.brand_data)
        except ValidationError as e:
            logger.warning(
                "Stored brand page is invalid",
                extra={"project_id": project.id, "error": str(e)},
            )
            page = None
        if page is None:
            raise NotFoundError("Brand page not found")
        return render_brand_page(page)

    async def render_project_page(self, project_id: EntityId) -> str:
        """Render the content blocks of a published project."""
        project = await self.project_service.get_published_project(project_id)
        return render_project_page(project.title, project.page_blocks or [])
