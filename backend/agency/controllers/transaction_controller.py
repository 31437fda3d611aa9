"""
Transaction controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.transaction_service import TransactionService
from agency.schemas.common import EntityId
from agency.schemas.account import (
    TransactionCreate,
    TransactionListResponse,
    TransactionMutationResponse,
)


class TransactionController(BaseController):
    """Controller for transaction operations."""

    def __init__(self, session: AsyncSession):
        self.transaction_service = TransactionService(session)

    async def list_transactions(self, account_id: Optional[EntityId] = None) -> TransactionListResponse:
        """List transactions, optionally for one account."""
        transactions, total = await self.transaction_service.list_transactions(account_id)
        return TransactionListResponse(transactions=transactions, total=total)

    async def create_transaction(self, transaction_data: TransactionCreate) -> TransactionMutationResponse:
        """Append a transaction."""
        return await self.transaction_service.create_transaction(transaction_data)
