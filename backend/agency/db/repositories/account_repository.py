"""
Account repository for database operations.
"""

from typing import Any, Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from agency.db.repositories.base_repository import BaseRepository
from agency.models.account import Account
from agency.schemas.common import normalize_id


class AccountRepository(BaseRepository[Account]):
    """Repository for account operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    def _base_query(self):
        """Base query with eager loading of the transaction ledger."""
        return (
            select(Account)
            .options(selectinload(Account.transactions))
            .execution_options(populate_existing=True)
        )

    async def list(
        self,
        skip: int = 0,
        limit: int = 1000,
        **filters,
    ) -> List[Account]:
        """List accounts with pagination and filters, eagerly loading transactions."""
        query = self._base_query()

        for key, value in filters.items():
            if hasattr(Account, key):
                query = query.where(getattr(Account, key) == value)

        query = query.order_by(Account.created_at).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get(self, id: Any) -> Optional[Account]:
        """Get account by ID with transactions loaded."""
        query = self._base_query().where(Account.id == normalize_id(id))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by (normalized) email."""
        query = self._base_query().where(Account.email == email.strip().lower())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_brief_token(self, token: str) -> Optional[Account]:
        """Get account by the token addressing its brief form."""
        query = self._base_query().where(Account.brief_token == token)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
