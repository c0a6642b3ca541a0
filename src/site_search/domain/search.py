"""Domain models for site search.

Value objects are immutable (frozen=True) and carry no infrastructure
dependencies. ``SearchDocument`` serializes with the camelCase keys used by the
on-disk index artifact (``topicTitle``) while accepting snake_case names from
Python callers.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContentType(str, Enum):
    """Kinds of content that can be indexed."""

    BLOG = "blog"
    DOCS = "docs"

    @classmethod
    def parse(cls, value: str) -> ContentType:
        """Resolve a user-supplied string, raising ValueError for unknown kinds."""
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown content type '{value}' (expected one of: {allowed})") from exc


class SearchDocument(BaseModel):
    """Normalized, flattened text record for one content item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    id: str
    title: str = ""
    description: str = ""
    content: str = ""
    topic: str
    topic_title: str = Field(alias="topicTitle")
    type: ContentType
    url: str
    date: int = Field(description="Epoch milliseconds")

    def to_artifact(self) -> dict:
        """Dump using the artifact's key names."""
        return self.model_dump(by_alias=True, mode="json")


class SearchResult(BaseModel):
    """A ranked, excerpted hit returned to callers."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    title: str
    excerpt: str
    topic: str
    type: ContentType
    url: str
    score: float


class SearchOptions(BaseModel):
    """Per-query options: optional type filter and result limit."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    type: ContentType | None = None
    limit: int = Field(default=10, ge=1)


class TopicMetadata(BaseModel):
    """Display metadata for a topic, read from its ``_topic.yaml``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    slug: str
    title: str = ""
    description: str = ""
    banner: str | None = None
