"""
Base controller class.
Controllers sit between endpoints and services and return response schemas;
they never touch the session directly.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
