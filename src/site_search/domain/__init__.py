"""Domain layer - search value objects."""

from .search import ContentType, SearchDocument, SearchOptions, SearchResult, TopicMetadata


__all__ = [
    "ContentType",
    "SearchDocument",
    "SearchOptions",
    "SearchResult",
    "TopicMetadata",
]
