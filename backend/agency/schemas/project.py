"""
Project Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
import enum

from agency.models.project import ProjectStatus
from agency.schemas.common import EntityId


class BlockType(str, enum.Enum):
    """Content block types of the project page builder."""
    HERO = "hero"
    TEXT = "text"
    IMAGE = "image"
    GALLERY = "gallery"
    QUOTE = "quote"
    SPLIT = "split"
    STATS = "stats"
    VIDEO = "video"
    CTA = "cta"
    SPACER = "spacer"
    BRAND_COVER = "brand-cover"
    SECTION_HEADER = "section-header"
    LOGO_SHOWCASE = "logo-showcase"
    LOGO_GRID = "logo-grid"
    LOGO_DONTS = "logo-donts"
    COLOR_PALETTE = "color-palette"
    TYPOGRAPHY_SHOWCASE = "typography-showcase"
    MOCKUP_GRID = "mockup-grid"


class PageBlock(BaseModel):
    """One content block; content keys depend on the block type."""
    id: str
    type: str
    content: Dict[str, Any] = {}
    order: int = 0
    style: Dict[str, Any] = {}


class TaskStatus(str, enum.Enum):
    """Project task status."""
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    DONE = "Done"


class ProjectTask(BaseModel):
    """Task tracked inside a project."""
    id: EntityId
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: str = "Medium"
    assignee_id: Optional[EntityId] = None
    due_date: Optional[str] = None


class ProjectFont(BaseModel):
    """Uploaded font file attached to a project."""
    id: str
    name: str
    family: str
    data: str  # data: URL or same-origin path
    format: str = "woff2"


class ProjectAssets(BaseModel):
    """Logos and fonts uploaded for a project."""
    logos: Dict[str, str] = {}  # primary / secondary / icon
    fonts: List[ProjectFont] = []
    selected_font_id: Optional[str] = None


class ProjectBase(BaseModel):
    """Base project schema with common fields."""
    title: str = Field(..., min_length=1, max_length=255)
    client: str = ""
    category: str = ""
    year: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(0, ge=0, le=100)
    due_date: Optional[str] = None
    budget: Optional[float] = None
    currency: Optional[str] = None
    linked_account_id: Optional[EntityId] = None
    linked_proposal_id: Optional[EntityId] = None
    linked_brief_token: Optional[str] = None
    linked_brand_page_id: Optional[str] = None
    brand_data: Optional[Dict[str, Any]] = None
    page_blocks: List[PageBlock] = []
    tasks: List[ProjectTask] = []
    project_assets: Optional[ProjectAssets] = None
    services: List[str] = []
    is_page_published: bool = False


class ProjectCreate(ProjectBase):
    """Schema for creating a project; the client may supply the identifier."""
    id: Optional[EntityId] = None


class ProjectUpdate(BaseModel):
    """Schema for updating a project (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    client: Optional[str] = None
    category: Optional[str] = None
    year: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    due_date: Optional[str] = None
    budget: Optional[float] = None
    currency: Optional[str] = None
    linked_account_id: Optional[EntityId] = None
    linked_proposal_id: Optional[EntityId] = None
    linked_brief_token: Optional[str] = None
    linked_brand_page_id: Optional[str] = None
    brand_data: Optional[Dict[str, Any]] = None
    page_blocks: Optional[List[PageBlock]] = None
    tasks: Optional[List[ProjectTask]] = None
    project_assets: Optional[ProjectAssets] = None
    services: Optional[List[str]] = None
    is_page_published: Optional[bool] = None


class ProjectResponse(ProjectBase):
    """Schema for project response; also the entity record of the client store."""
    id: EntityId
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    """Schema for project list response."""
    projects: List[ProjectResponse]
    total: int


class ProjectMutationResponse(BaseModel):
    """Create/update acknowledgement carrying the canonical record."""
    success: bool = True
    project: ProjectResponse


# Fields a bulk sync may merge into an existing record
SYNCABLE_PROJECT_FIELDS = (
    "title", "client", "category", "year", "image", "description",
    "status", "progress", "due_date", "is_page_published", "brand_data",
    "page_blocks", "linked_account_id", "linked_proposal_id",
    "linked_brief_token", "linked_brand_page_id", "project_assets",
    "tasks", "services", "budget", "currency",
)

# Large embedded payloads left out of the default list projection
HEAVY_PROJECT_FIELDS = ("brand_data", "page_blocks")


class ProjectSyncRequest(BaseModel):
    """Externally sourced project-like records to merge into the store."""
    projects: Optional[List[Dict[str, Any]]] = None


class ProjectSyncResult(BaseModel):
    """Per-record action log entry."""
    id: Optional[EntityId] = None
    action: str


class ProjectSyncReport(BaseModel):
    """Outcome of a bulk project sync."""
    success: bool = True
    synced: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0
    results: List[ProjectSyncResult] = []
