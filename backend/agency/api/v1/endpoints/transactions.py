"""
Transaction API endpoints. Transactions are append-only.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.session import get_db
from agency.controllers.transaction_controller import TransactionController
from agency.schemas.account import (
    TransactionCreate,
    TransactionListResponse,
    TransactionMutationResponse,
)

router = APIRouter()


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    account_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> TransactionListResponse:
    """List transactions, newest first."""
    controller = TransactionController(db)
    return await controller.list_transactions(account_id)


@router.post("", response_model=TransactionMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    db: AsyncSession = Depends(get_db),
) -> TransactionMutationResponse:
    """Append a transaction and update the account totals."""
    controller = TransactionController(db)
    return await controller.create_transaction(transaction_data)
