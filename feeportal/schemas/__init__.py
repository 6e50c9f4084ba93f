"""
Schemas Package

This package contains Pydantic models and schemas for the application.
"""

from .api import ApiResponse, Pagination, PaginatedList

__all__ = [
    "ApiResponse",
    "Pagination",
    "PaginatedList",
]
