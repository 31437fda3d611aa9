"""
Transaction service. Appends ledger entries and keeps account totals current.
"""

from typing import Any, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.db.base import utcnow
from agency.db.repositories.account_repository import AccountRepository
from agency.db.repositories.transaction_repository import TransactionRepository
from agency.schemas.account import (
    TransactionCreate,
    TransactionResponse,
    TransactionMutationResponse,
)
from agency.utils.ledger import LedgerTotals, apply_transaction
from agency.core.exceptions import InvalidInputError
from agency.core.logging import get_logger

logger = get_logger(__name__)


class TransactionService(BaseService):
    """Service for transaction operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.account_repo = AccountRepository(session)
        self.transaction_repo = TransactionRepository(session)

    async def list_transactions(self, account_id: Optional[Any] = None) -> tuple[List[TransactionResponse], int]:
        """List transactions, newest first."""
        transactions = await self.transaction_repo.list_newest_first(account_id)
        return [TransactionResponse.model_validate(t) for t in transactions], len(transactions)

    async def create_transaction(self, transaction_data: TransactionCreate) -> TransactionMutationResponse:
        """
        Append a transaction and update the owning account's totals.

        The entry and the new totals are committed together.

        Args:
            transaction_data: Account, kind, amount, description and date

        Returns:
            The stored transaction with the account's new totals and balance
        """
        account = self.require(await self.account_repo.get(transaction_data.account_id), "Account")

        try:
            totals = apply_transaction(
                LedgerTotals(account.total_debt or 0.0, account.total_paid or 0.0),
                transaction_data.type,
                transaction_data.amount,
            )
        except ValueError as e:
            raise InvalidInputError(str(e))

        transaction = await self.transaction_repo.create(
            account_id=account.id,
            type=transaction_data.type,
            amount=transaction_data.amount,
            description=transaction_data.description,
            date=transaction_data.date or utcnow(),
        )
        account.total_debt = totals.total_debt
        account.total_paid = totals.total_paid
        account.balance = totals.balance
        await self.session.commit()

        logger.info(
            "Transaction recorded",
            extra={
                "account_id": account.id,
                "type": transaction_data.type.value,
                "amount": transaction_data.amount,
                "balance": totals.balance,
            },
        )
        return TransactionMutationResponse(
            transaction=TransactionResponse.model_validate(transaction),
            total_debt=totals.total_debt,
            total_paid=totals.total_paid,
            balance=totals.balance,
        )
