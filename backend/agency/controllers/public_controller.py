"""
Public page controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.brand_page_service import BrandPageService
from agency.schemas.common import EntityId


class PublicController(BaseController):
    """Controller for published project pages."""

    def __init__(self, session: AsyncSession):
        self.brand_page_service = BrandPageService(session)

    async def get_brand_page(self, project_id: EntityId) -> str:
        """Rendered brand page HTML."""
        return await self.brand_page_service.render_brand_page(project_id)

    async def get_project_page(self, project_id: EntityId) -> str:
        """Rendered content block HTML."""
        return await self.brand_page_service.render_project_page(project_id)
