"""
Project model for agency client work.
"""

from sqlalchemy import Column, String, Text, Integer, Float, Boolean, JSON, DateTime, Enum as SQLEnum
import enum

from agency.db.base import Base, utcnow


class ProjectStatus(str, enum.Enum):
    """Project lifecycle status enumeration."""
    PLANNING = "Planning"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class Project(Base):
    """
    Project model.

    The identifier is stored as a string: clients may assign numeric ids
    (creation timestamps) or opaque string ids (seed records).
    """

    __tablename__ = "projects"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    client = Column(String(255), nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    year = Column(String(10), nullable=True)
    image = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(ProjectStatus, values_callable=lambda x: [e.value for e in ProjectStatus]),
        nullable=False,
        default=ProjectStatus.PLANNING,
        index=True,
    )
    progress = Column(Integer, nullable=False, default=0)
    due_date = Column(String(32), nullable=True)
    budget = Column(Float, nullable=True)
    currency = Column(String(3), nullable=True)

    # Workflow links (may dangle)
    linked_account_id = Column(String(64), nullable=True, index=True)
    linked_proposal_id = Column(String(64), nullable=True)
    linked_brief_token = Column(String(64), nullable=True)
    linked_brand_page_id = Column(String(64), nullable=True)

    # Embedded payloads
    brand_data = Column(JSON, nullable=True)
    page_blocks = Column(JSON, nullable=True)
    tasks = Column(JSON, nullable=True)
    project_assets = Column(JSON, nullable=True)
    services = Column(JSON, nullable=True)
    is_page_published = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
