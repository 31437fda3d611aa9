"""
Proposal model: priced line items sent to a prospective client.
"""

from sqlalchemy import Column, String, Float, Boolean, JSON, DateTime, Enum as SQLEnum
import enum

from agency.db.base import Base, utcnow


class ProposalStatus(str, enum.Enum):
    """Proposal status enumeration."""
    DRAFT = "Draft"
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class Proposal(Base):
    """Proposal model."""

    __tablename__ = "proposals"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=False, default="")
    date = Column(String(32), nullable=True)
    valid_until = Column(String(32), nullable=True)
    items = Column(JSON, nullable=True)
    total_amount = Column(Float, nullable=False, default=0.0)
    status = Column(
        SQLEnum(ProposalStatus, values_callable=lambda x: [e.value for e in ProposalStatus]),
        nullable=False,
        default=ProposalStatus.DRAFT,
        index=True,
    )
    currency = Column(String(3), nullable=False, default="TRY")
    currency_symbol = Column(String(8), nullable=True)
    tax_rate = Column(Float, nullable=False, default=20.0)
    show_tax = Column(Boolean, nullable=False, default=True)
    account_id = Column(String(64), nullable=True, index=True)
    # Print-layout customization (logo text, colors, footer, contact lines)
    branding = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
