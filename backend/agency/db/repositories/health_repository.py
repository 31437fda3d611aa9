"""
Health repository.
Answers whether the document store is reachable and has its tables.
"""

from typing import Iterable, List

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class HealthRepository:
    """Read-only checks against the store's database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def check_database(self) -> bool:
        try:
            result = await self.session.execute(text("SELECT 1"))
            return result.scalar() == 1
        except SQLAlchemyError:
            return False

    async def missing_tables(self, expected: Iterable[str]) -> List[str]:
        """
        Names from expected that the connected database does not have.

        Args:
            expected: Table names the models declare

        Returns:
            Sorted list of absent table names
        """
        def _table_names(sync_session) -> set:
            return set(inspect(sync_session.connection()).get_table_names())

        present = await self.session.run_sync(_table_names)
        return sorted(set(expected) - present)
