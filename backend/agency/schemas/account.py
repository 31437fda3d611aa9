"""
Account and transaction Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Union
from datetime import datetime

from agency.models.account import AccountStatus, BriefStatus
from agency.models.transaction import TransactionType
from agency.schemas.common import EntityId
from agency.utils.ledger import check_amount


BriefAnswer = Union[str, List[str]]


def validate_amount(value: float) -> float:
    """Transaction amounts are positive finite numbers, kept to cents."""
    return check_amount(value)


class TransactionCreate(BaseModel):
    """Schema for appending a transaction to an account."""
    account_id: EntityId
    type: TransactionType
    amount: float
    description: str = ""
    date: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, value: float) -> float:
        return validate_amount(value)


class TransactionResponse(BaseModel):
    """Schema for transaction response."""
    id: EntityId
    account_id: EntityId
    type: TransactionType
    amount: float
    description: str = ""
    date: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    """Schema for transaction list response."""
    transactions: List[TransactionResponse]
    total: int


class TransactionMutationResponse(BaseModel):
    """Create acknowledgement carrying the stored transaction and new totals."""
    success: bool = True
    transaction: TransactionResponse
    total_debt: float
    total_paid: float
    balance: float


class BriefIntake(BaseModel):
    """Brief questionnaire embedded in an account."""
    token: Optional[str] = None
    form_type: Optional[str] = None
    status: BriefStatus = BriefStatus.NONE
    responses: Dict[str, BriefAnswer] = {}
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None


class AccountCreate(BaseModel):
    """Schema for creating an account with client portal credentials."""
    name: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str
    username: Optional[str] = Field(None, max_length=100)
    brief_form_type: Optional[str] = None


class AccountUpdate(BaseModel):
    """Schema for updating an account (all fields optional; totals are ledger-owned)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    username: Optional[str] = Field(None, max_length=100)
    status: Optional[AccountStatus] = None
    brief_form_type: Optional[str] = None
    brief_status: Optional[BriefStatus] = None
    brief_responses: Optional[Dict[str, BriefAnswer]] = None


class AccountResponse(BaseModel):
    """Schema for account response; also the entity record of the client store."""
    id: EntityId
    name: str
    company: str
    email: str = ""
    username: Optional[str] = None
    total_debt: float = 0.0
    total_paid: float = 0.0
    balance: float = 0.0
    status: AccountStatus = AccountStatus.ACTIVE
    brief: BriefIntake = BriefIntake()
    transactions: List[TransactionResponse] = []
    created_at: Optional[datetime] = None


class AccountListResponse(BaseModel):
    """Schema for account list response."""
    accounts: List[AccountResponse]
    total: int


class AccountMutationResponse(BaseModel):
    """Create/update acknowledgement carrying the canonical record."""
    success: bool = True
    account: AccountResponse


class BriefInfo(BaseModel):
    """Public view of a pending brief form."""
    account_id: EntityId
    form_type: str
    account_name: str
    account_company: str


class BriefSubmission(BaseModel):
    """Answers keyed by question identifier."""
    responses: Dict[str, BriefAnswer]
