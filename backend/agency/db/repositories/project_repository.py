"""
Project repository for database operations.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from agency.db.repositories.base_repository import BaseRepository
from agency.models.project import Project


class ProjectRepository(BaseRepository[Project]):
    """Repository for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Project, session)

    async def list_ordered(self, skip: int = 0, limit: int = 1000) -> List[Project]:
        """List projects oldest first, the order the dashboard shows them in."""
        result = await self.session.execute(
            select(Project).order_by(Project.created_at, Project.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
