"""
API middleware for authentication and common concerns.
Admin routes are guarded by a single bearer token.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from agency.core.security import is_valid_admin_token
from agency.core.logging import get_logger

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """
    Admin authentication dependency, applied at router level.

    Args:
        credentials: HTTP Bearer token credentials (injected by FastAPI)

    Raises:
        HTTPException: 401 when the token is missing or wrong
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not is_valid_admin_token(credentials.credentials):
        logger.warning("Rejected admin token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
