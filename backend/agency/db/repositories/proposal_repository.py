"""
Proposal repository for database operations.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from agency.db.repositories.base_repository import BaseRepository
from agency.models.proposal import Proposal


class ProposalRepository(BaseRepository[Proposal]):
    """Repository for proposal operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Proposal, session)

    async def list_newest_first(self) -> List[Proposal]:
        """List proposals, most recently created first."""
        result = await self.session.execute(
            select(Proposal).order_by(Proposal.created_at.desc(), Proposal.id)
        )
        return list(result.scalars().all())
