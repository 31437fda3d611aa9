"""
Health service.
Reports uptime, database reachability and whether the store tables exist.
"""

import time
from sqlalchemy.exc import SQLAlchemyError

from agency.core.config import settings
from agency.core.logging import get_logger
from agency.schemas.health import HealthResponse
from agency.services.base_service import BaseService

logger = get_logger(__name__)


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self) -> HealthResponse:
        uptime_str = f"PT{int(time.time() - self.start_time)}S"  # ISO 8601 duration
        checks = {}

        try:
            from agency.db import session as db_session
            from agency.db.base import Base
            from agency.db.repositories.health_repository import HealthRepository
            import agency.models  # noqa: F401

            if db_session.async_session_maker is None:
                db_session.create_sessionmaker()
            async with db_session.async_session_maker() as session:
                repo = HealthRepository(session=session)
                if await repo.check_database():
                    checks["database"] = "ok"
                    missing = await repo.missing_tables(Base.metadata.tables.keys())
                    checks["schema"] = "ok" if not missing else f"missing: {', '.join(missing)}"
                else:
                    checks["database"] = "error"
        except (SQLAlchemyError, ImportError, OSError) as e:
            logger.warning("Database health check failed", extra={"error": str(e)})
            checks["database"] = f"error: {str(e)}"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"
        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )
