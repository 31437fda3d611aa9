"""
Records that live only in the client store (no remote counterpart).
"""

from pydantic import BaseModel, Field
from typing import Optional, List
import enum

from agency.schemas.common import EntityId


class ExpenseCategory(str, enum.Enum):
    """Expense category enumeration."""
    SOFTWARE = "Software"
    RENT = "Rent"
    SALARIES = "Salaries"
    MARKETING = "Marketing"
    MISC = "Misc"


class Expense(BaseModel):
    """Studio expense."""
    id: EntityId
    title: str
    amount: float = Field(..., ge=0)
    currency: str = "TRY"
    category: ExpenseCategory = ExpenseCategory.MISC
    date: str


class Message(BaseModel):
    """Inbox message (client request or system notice)."""
    id: EntityId
    sender: str
    subject: str
    content: str = ""
    date: str
    read: bool = False
    type: str = "request"


class TeamMember(BaseModel):
    """Studio team member."""
    id: EntityId
    name: str
    role: str
    avatar: Optional[str] = None
    status: str = "offline"
    skills: List[str] = []
    availability: int = Field(100, ge=0, le=100)
