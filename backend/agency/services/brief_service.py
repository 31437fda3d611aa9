"""
Brief intake service: the token-addressed questionnaire a client fills in.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.db.base import utcnow
from agency.db.repositories.account_repository import AccountRepository
from agency.models.account import BriefStatus
from agency.schemas.account import BriefInfo, BriefSubmission
from agency.core.exceptions import InvalidInputError, NotFoundError
from agency.core.logging import get_logger

logger = get_logger(__name__)

MIN_TOKEN_LENGTH = 10


class BriefService(BaseService):
    """Service for brief intake operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.account_repo = AccountRepository(session)

    async def get_brief(self, token: str) -> BriefInfo:
        """
        Look up the brief form a token addresses.

        Raises:
            InvalidInputError: Malformed token, brief already sent, or no form assigned
            NotFoundError: No account holds the token
        """
        if not token or len(token) < MIN_TOKEN_LENGTH:
            raise InvalidInputError("Invalid brief token")

        account = await self.account_repo.get_by_brief_token(token)
        if not account:
            raise NotFoundError("Brief not found")
        if account.brief_status in (BriefStatus.SUBMITTED, BriefStatus.APPROVED):
            raise InvalidInputError("Brief has already been submitted")
        if not account.brief_form_type:
            raise InvalidInputError("No brief form assigned")

        return BriefInfo(
            account_id=account.id,
            form_type=account.brief_form_type,
            account_name=account.name,
            account_company=account.company,
        )

    async def submit_brief(self, token: str, submission: BriefSubmission) -> None:
        """Store the answers and advance the brief from pending to submitted."""
        if not token or len(token) < MIN_TOKEN_LENGTH:
            raise InvalidInputError("Invalid brief token")

        account = await self.account_repo.get_by_brief_token(token)
        if not account or account.brief_status != BriefStatus.PENDING:
            raise NotFoundError("Brief not found or already submitted")

        account.brief_responses = dict(submission.responses)
        account.brief_status = BriefStatus.SUBMITTED
        account.brief_submitted_at = utcnow()
        await self.session.commit()
        logger.info("Brief submitted", extra={"account_id": account.id})
