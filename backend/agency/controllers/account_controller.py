"""
Account controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.account_service import AccountService
from agency.schemas.common import EntityId
from agency.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountListResponse,
    AccountMutationResponse,
)


class AccountController(BaseController):
    """Controller for account operations."""

    def __init__(self, session: AsyncSession):
        self.account_service = AccountService(session)

    async def create_account(self, account_data: AccountCreate) -> AccountMutationResponse:
        """Create a new account."""
        account = await self.account_service.create_account(account_data)
        return AccountMutationResponse(account=account)

    async def get_account(self, account_id: EntityId) -> Optional[AccountResponse]:
        """Get account by ID."""
        return await self.account_service.get_account(account_id)

    async def list_accounts(self, skip: int = 0, limit: int = 1000) -> AccountListResponse:
        """List accounts."""
        accounts, total = await self.account_service.list_accounts(skip=skip, limit=limit)
        return AccountListResponse(accounts=accounts, total=total)

    async def update_account(
        self,
        account_id: EntityId,
        account_data: AccountUpdate,
    ) -> Optional[AccountMutationResponse]:
        """Update an account."""
        account = await self.account_service.update_account(account_id, account_data)
        if not account:
            return None
        return AccountMutationResponse(account=account)

    async def delete_account(self, account_id: EntityId) -> bool:
        """Delete an account and its transactions."""
        return await self.account_service.delete_account(account_id)

    async def approve_brief(self, account_id: EntityId) -> AccountMutationResponse:
        """Approve a submitted brief."""
        account = await self.account_service.approve_brief(account_id)
        return AccountMutationResponse(account=account)
