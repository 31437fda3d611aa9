"""
Brief intake controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.brief_service import BriefService
from agency.schemas.account import BriefInfo, BriefSubmission


class BriefController(BaseController):
    """Controller for the public brief form."""

    def __init__(self, session: AsyncSession):
        self.brief_service = BriefService(session)

    async def get_brief(self, token: str) -> BriefInfo:
        return await self.brief_service.get_brief(token)

    async def submit_brief(self, token: str, submission: BriefSubmission) -> dict:
        await self.brief_service.submit_brief(token, submission)
        return {"success": True}
