"""
Account API endpoints.
"""

from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.session import get_db
from agency.controllers.account_controller import AccountController
from agency.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountListResponse,
    AccountMutationResponse,
)

router = APIRouter()


@router.post("", response_model=AccountMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    account_data: AccountCreate,
    db: AsyncSession = Depends(get_db),
) -> AccountMutationResponse:
    """Create a new client account."""
    controller = AccountController(db)
    return await controller.create_account(account_data)


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    skip: int = Query(0, ge=0),
    limit: int = Query(1000, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> AccountListResponse:
    """List accounts with their transactions."""
    controller = AccountController(db)
    return await controller.list_accounts(skip=skip, limit=limit)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
) -> AccountResponse:
    """Get account by ID."""
    controller = AccountController(db)
    account = await controller.get_account(account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )
    return account


@router.put("/{account_id}", response_model=AccountMutationResponse)
async def update_account(
    account_id: str,
    account_data: AccountUpdate,
    db: AsyncSession = Depends(get_db),
) -> AccountMutationResponse:
    """Update an account."""
    controller = AccountController(db)
    result = await controller.update_account(account_id, account_data)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )
    return result


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete an account and its transactions."""
    controller = AccountController(db)
    deleted = await controller.delete_account(account_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )


@router.post("/{account_id}/brief/approve", response_model=AccountMutationResponse)
async def approve_brief(
    account_id: str,
    db: AsyncSession = Depends(get_db),
) -> AccountMutationResponse:
    """Approve a submitted brief."""
    controller = AccountController(db)
    return await controller.approve_brief(account_id)
