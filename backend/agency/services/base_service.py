"""
Base service class.
Services own the unit of work: they call repositories and commit.
"""

from abc import ABC
from typing import Optional, TypeVar

from agency.core.exceptions import NotFoundError

T = TypeVar("T")


class BaseService(ABC):
    """Base service class for all services."""

    @staticmethod
    def require(entity: Optional[T], label: str) -> T:
        """Return entity, or raise NotFoundError("<label> not found") when it is missing."""
        if entity is None:
            raise NotFoundError(f"{label} not found")
        return entity
