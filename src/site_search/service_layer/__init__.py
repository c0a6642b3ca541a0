"""Service layer - search orchestration."""

from .search_service import InvalidSearchOptionsError, SearchService


__all__ = [
    "InvalidSearchOptionsError",
    "SearchService",
]
