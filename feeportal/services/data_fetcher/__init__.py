"""
Data Fetcher Package

Async loading/error/data state around resource API calls.
"""

from .fetcher import DataFetcher, FormSubmitter, PaginatedFetcher

__all__ = [
    "DataFetcher",
    "FormSubmitter",
    "PaginatedFetcher",
]
