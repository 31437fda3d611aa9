"""
Account service with business logic.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.db.base import utcnow
from agency.db.repositories.account_repository import AccountRepository
from agency.models.account import Account, BriefStatus, BriefFormType
from agency.schemas.account import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    BriefIntake,
    TransactionResponse,
)
from agency.schemas.common import EntityId
from agency.core.exceptions import ConflictError, InvalidInputError
from agency.core.security import validate_password, hash_password, generate_brief_token
from agency.core.logging import get_logger

logger = get_logger(__name__)


def _resolve_form_type(form_type: Optional[str]) -> Optional[str]:
    """Validate a brief form type; "none" and empty mean no form assigned."""
    if not form_type or form_type == "none":
        return None
    try:
        return BriefFormType(form_type).value
    except ValueError:
        raise InvalidInputError(f"Unknown brief form type: {form_type}")


def account_to_response(account: Account) -> AccountResponse:
    """Build the public account representation (never includes credentials)."""
    return AccountResponse(
        id=account.id,
        name=account.name,
        company=account.company,
        email=account.email,
        username=account.username,
        total_debt=account.total_debt,
        total_paid=account.total_paid,
        balance=account.balance,
        status=account.status,
        brief=BriefIntake(
            token=account.brief_token,
            form_type=account.brief_form_type,
            status=account.brief_status,
            responses=account.brief_responses or {},
            submitted_at=account.brief_submitted_at,
            approved_at=account.brief_approved_at,
        ),
        transactions=[TransactionResponse.model_validate(t) for t in account.transactions],
        created_at=account.created_at,
    )


class AccountService(BaseService):
    """Service for account operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.account_repo = AccountRepository(session)

    async def create_account(self, account_data: AccountCreate) -> AccountResponse:
        """
        Create a client account with portal credentials.

        Args:
            account_data: Contact details, password and optional brief form

        Returns:
            The created account, including its brief token

        Raises:
            InvalidInputError: Weak password or unknown brief form type
            ConflictError: Email or username already in use
        """
        email = account_data.email.strip().lower()
        check = validate_password(account_data.password, email)
        if not check.valid:
            raise InvalidInputError(
                "Password does not meet requirements",
                details={"errors": check.errors, "suggestions": check.suggestions},
            )
        form_type = _resolve_form_type(account_data.brief_form_type)

        if await self.account_repo.get_by_email(email):
            raise ConflictError("An account with this email already exists")
        if account_data.username and await self.account_repo.list(username=account_data.username):
            raise ConflictError("Username is already taken")

        account = await self.account_repo.create(
            name=account_data.name,
            company=account_data.company,
            email=email,
            username=account_data.username,
            password_hash=hash_password(account_data.password),
            total_debt=0.0,
            total_paid=0.0,
            balance=0.0,
            brief_token=generate_brief_token(),
            brief_form_type=form_type,
            brief_status=BriefStatus.PENDING if form_type else BriefStatus.NONE,
            brief_responses={},
        )
        await self.session.commit()
        logger.info("Account created", extra={"account_id": account.id})
        return await self.get_account(account.id)

    async def get_account(self, account_id: EntityId) -> Optional[AccountResponse]:
        """Get account by ID."""
        account = await self.account_repo.get(account_id)
        if not account:
            return None
        return account_to_response(account)

    async def list_accounts(self, skip: int = 0, limit: int = 1000) -> tuple[List[AccountResponse], int]:
        """List accounts with their transactions attached."""
        accounts = await self.account_repo.list(skip=skip, limit=limit)
        return [account_to_response(a) for a in accounts], len(accounts)

    async def update_account(
        self,
        account_id: EntityId,
        account_data: AccountUpdate,
    ) -> Optional[AccountResponse]:
        """Update contact, status and brief fields. Ledger totals are not writable."""
        account = await self.account_repo.get(account_id)
        if not account:
            return None

        update_dict = account_data.model_dump(exclude_unset=True)
        if "email" in update_dict and update_dict["email"] is not None:
            update_dict["email"] = update_dict["email"].strip().lower()
            other = await self.account_repo.get_by_email(update_dict["email"])
            if other and other.id != account.id:
                raise ConflictError("An account with this email already exists")
        if "brief_form_type" in update_dict:
            update_dict["brief_form_type"] = _resolve_form_type(update_dict["brief_form_type"])
            if update_dict["brief_form_type"] and account.brief_status == BriefStatus.NONE:
                update_dict.setdefault("brief_status", BriefStatus.PENDING)
        if "brief_responses" in update_dict and update_dict["brief_responses"] is None:
            update_dict["brief_responses"] = {}

        await self.account_repo.update(account.id, **update_dict)
        await self.session.commit()
        return await self.get_account(account.id)

    async def delete_account(self, account_id: EntityId) -> bool:
        """Delete an account together with its transactions."""
        account = await self.account_repo.get(account_id)
        if not account:
            return False
        await self.session.delete(account)
        await self.session.commit()
        logger.info("Account deleted", extra={"account_id": account.id})
        return True

    async def approve_brief(self, account_id: EntityId) -> AccountResponse:
        """Advance a submitted brief to approved."""
        account = self.require(await self.account_repo.get(account_id), "Account")
        if account.brief_status != BriefStatus.SUBMITTED:
            raise InvalidInputError(
                "Only submitted briefs can be approved",
                details={"brief_status": account.brief_status.value},
            )
        account.brief_status = BriefStatus.APPROVED
        account.brief_approved_at = utcnow()
        await self.session.commit()
        return await self.get_account(account.id)
