"""
Transaction repository for database operations.
"""

from typing import Any, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from agency.db.repositories.base_repository import BaseRepository
from agency.models.transaction import Transaction
from agency.schemas.common import normalize_id


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for ledger entries. There is no update or single delete."""

    def __init__(self, session: AsyncSession):
        super().__init__(Transaction, session)

    async def list_newest_first(self, account_id: Optional[Any] = None) -> List[Transaction]:
        """List transactions, optionally for one account, newest first."""
        query = select(Transaction)
        if account_id is not None:
            query = query.where(Transaction.account_id == normalize_id(account_id))
        query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())
