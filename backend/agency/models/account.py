"""
Account model: client ledger (running debt/payment totals) and brief intake.
"""

from sqlalchemy import Column, String, Float, JSON, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
import uuid
import enum

from agency.db.base import Base, utcnow


class AccountStatus(str, enum.Enum):
    """Account status enumeration."""
    ACTIVE = "Active"
    ARCHIVED = "Archived"


class BriefStatus(str, enum.Enum):
    """Brief intake lifecycle: none -> pending -> submitted -> approved."""
    NONE = "none"
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"


class BriefFormType(str, enum.Enum):
    """Brief questionnaire types that can be assigned to an account."""
    LOGO = "logo"
    BRAND_IDENTITY = "brand-identity"
    WEB_DESIGN = "web-design"
    SOCIAL_MEDIA = "social-media"
    PACKAGING = "packaging"
    GENERAL = "general"


def _new_id() -> str:
    return uuid.uuid4().hex


class Account(Base):
    """Account model for client management."""

    __tablename__ = "accounts"

    id = Column(String(64), primary_key=True, default=_new_id, index=True)
    name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(100), nullable=True, unique=True)
    password_hash = Column(String(255), nullable=False)

    total_debt = Column(Float, nullable=False, default=0.0)
    total_paid = Column(Float, nullable=False, default=0.0)
    balance = Column(Float, nullable=False, default=0.0)
    status = Column(
        SQLEnum(AccountStatus, values_callable=lambda x: [e.value for e in AccountStatus]),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )

    brief_token = Column(String(64), nullable=False, unique=True, index=True)
    brief_form_type = Column(String(32), nullable=True)
    brief_status = Column(
        SQLEnum(BriefStatus, values_callable=lambda x: [e.value for e in BriefStatus]),
        nullable=False,
        default=BriefStatus.NONE,
    )
    brief_responses = Column(JSON, nullable=True)
    brief_submitted_at = Column(DateTime(timezone=True), nullable=True)
    brief_approved_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    transactions = relationship(
        "Transaction",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="Transaction.date",
    )
