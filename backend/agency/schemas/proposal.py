"""
Proposal Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
import enum

from agency.models.proposal import ProposalStatus
from agency.schemas.common import EntityId


class Currency(str, enum.Enum):
    """Currencies a proposal can be priced in."""
    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"


class ProposalItem(BaseModel):
    """Line item. total is quantity * unit_price unless entered directly."""
    id: EntityId
    description: str = ""
    quantity: float = Field(1, ge=0)
    unit_price: float = Field(0, ge=0)
    total: float = Field(0, ge=0)
    direct_total: bool = False

    @model_validator(mode="after")
    def compute_total(self):
        if not self.direct_total:
            self.total = self.quantity * self.unit_price
        return self


class ProposalBase(BaseModel):
    """Base proposal schema with common fields."""
    title: str = Field(..., min_length=1, max_length=255)
    client_name: str = ""
    date: Optional[str] = None
    valid_until: Optional[str] = None
    items: List[ProposalItem] = []
    total_amount: float = 0.0
    status: ProposalStatus = ProposalStatus.DRAFT
    currency: Currency = Currency.TRY
    currency_symbol: Optional[str] = None
    tax_rate: float = Field(20.0, ge=0, le=100)
    show_tax: bool = True
    account_id: Optional[EntityId] = None
    branding: Dict[str, Any] = {}

    @model_validator(mode="after")
    def compute_total_amount(self):
        if self.items:
            self.total_amount = sum(item.total for item in self.items)
        return self


class ProposalCreate(ProposalBase):
    """Schema for creating a proposal; the client may supply the identifier."""
    id: Optional[EntityId] = None


class ProposalUpdate(BaseModel):
    """Schema for updating a proposal (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    client_name: Optional[str] = None
    date: Optional[str] = None
    valid_until: Optional[str] = None
    items: Optional[List[ProposalItem]] = None
    total_amount: Optional[float] = None
    status: Optional[ProposalStatus] = None
    currency: Optional[Currency] = None
    currency_symbol: Optional[str] = None
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    show_tax: Optional[bool] = None
    account_id: Optional[EntityId] = None
    branding: Optional[Dict[str, Any]] = None


class ProposalResponse(ProposalBase):
    """Schema for proposal response; also the entity record of the client store."""
    id: EntityId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProposalListResponse(BaseModel):
    """Schema for proposal list response."""
    proposals: List[ProposalResponse]
    total: int


class ProposalMutationResponse(BaseModel):
    """Create/update acknowledgement carrying the canonical record."""
    success: bool = True
    proposal: ProposalResponse


class ProposalTotalsResponse(BaseModel):
    """Printed totals of a proposal."""
    subtotal: float
    tax_rate: float
    tax: float
    grand_total: float
    currency_symbol: str
    formatted_subtotal: str
    formatted_tax: str
    formatted_grand_total: str
