"""
Public brief form endpoints. Rate limited; addressed by token.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agency.core.config import settings
from agency.core.rate_limit import limiter
from agency.db.session import get_db
from agency.controllers.brief_controller import BriefController
from agency.schemas.account import BriefInfo, BriefSubmission

router = APIRouter()


@router.get("/{token}", response_model=BriefInfo)
@limiter.limit(settings.BRIEF_RATE_LIMIT)
async def get_brief(
    request: Request,
    token: str,
    db: AsyncSession = Depends(get_db),
) -> BriefInfo:
    """Brief form details for a token."""
    controller = BriefController(db)
    return await controller.get_brief(token)


@router.post("/{token}")
@limiter.limit(settings.BRIEF_RATE_LIMIT)
async def submit_brief(
    request: Request,
    token: str,
    submission: BriefSubmission,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Submit answers to a pending brief."""
    controller = BriefController(db)
    return await controller.submit_brief(token, submission)
