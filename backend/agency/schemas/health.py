"""
Health check response schemas.
"""

from pydantic import BaseModel
from typing import Dict


class HealthResponse(BaseModel):
    """Status is "ok" only when every check reports "ok"."""
    status: str
    version: str
    uptime: str
    checks: Dict[str, str] = {}
