"""
API v1 router that aggregates all endpoint routers.
Admin routes require the admin bearer token; health, brief and public
page routes do not.
"""

from fastapi import APIRouter, Depends
from agency.api.v1.middleware import require_admin

from agency.api.v1.endpoints import (
    health,
    projects,
    accounts,
    transactions,
    proposals,
    admin,
    brief,
    public,
)

api_router = APIRouter()

# Public routes (no authentication required)
api_router.include_router(health.router, tags=["health"])
api_router.include_router(brief.router, prefix="/brief", tags=["brief"])
api_router.include_router(public.router, prefix="/public", tags=["public"])

# Admin routes
api_router.include_router(
    projects.router,
    prefix="/projects",
    tags=["projects"],
    dependencies=[Depends(require_admin)],
)
api_router.include_router(
    accounts.router,
    prefix="/accounts",
    tags=["accounts"],
    dependencies=[Depends(require_admin)],
)
api_router.include_router(
    transactions.router,
    prefix="/transactions",
    tags=["transactions"],
    dependencies=[Depends(require_admin)],
)
api_router.include_router(
    proposals.router,
    prefix="/proposals",
    tags=["proposals"],
    dependencies=[Depends(require_admin)],
)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)
