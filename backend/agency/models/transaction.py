"""
Transaction model. Append-only ledger entries against an account.
"""

from sqlalchemy import Column, String, Float, Text, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from agency.db.base import Base, utcnow


class TransactionType(str, enum.Enum):
    """Debit ("Debt") or credit ("Payment")."""
    DEBT = "Debt"
    PAYMENT = "Payment"


class Transaction(Base):
    """Ledger entry model."""

    __tablename__ = "transactions"

    id = Column(String(64), primary_key=True, default=lambda: uuid.uuid4().hex, index=True)
    account_id = Column(String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(
        SQLEnum(TransactionType, values_callable=lambda x: [e.value for e in TransactionType]),
        nullable=False,
    )
    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    account = relationship("Account", back_populates="transactions")
