"""Adapters layer - content source implementations."""

from .content_source import (
    AbstractContentSource,
    ContentItem,
    DocumentLoadError,
    FilesystemContentSource,
)


__all__ = [
    "AbstractContentSource",
    "ContentItem",
    "DocumentLoadError",
    "FilesystemContentSource",
]
