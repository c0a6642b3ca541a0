"""Build-time indexer for site content.

Walks every requested content type through an ``AbstractContentSource``,
flattens each published item into a ``SearchDocument``, and (by default)
rewrites the index artifact with the full result. Failures are contained to
the item that caused them: a broken file is logged, recorded in the build
result, and left out, while the rest of the corpus is still indexed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
import logging
import math
from pathlib import Path
import re
import time
from typing import Any

from site_search.adapters.content_source import AbstractContentSource, ContentItem, DocumentLoadError
from site_search.domain.search import ContentType, SearchDocument, TopicMetadata
from site_search.observability.metrics import INDEX_BUILD_ERRORS
from site_search.observability.tracing import create_span
from site_search.search.storage import IndexArtifactStore


logger = logging.getLogger(__name__)

DEFAULT_MAX_CONTENT_LENGTH = 10_000
# Largest magnitude a JavaScript Date accepts
MAX_EPOCH_MILLIS = 8_640_000_000_000_000

_IMPORT_LINE_PATTERN = re.compile(r"^import\s+.+$", re.MULTILINE)
_TAG_PATTERN = re.compile(r"<[^>]+>")
_FENCED_CODE_PATTERN = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_PATTERN = re.compile(r"`[^`]+`")
_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_HEADING_MARKER_PATTERN = re.compile(r"^#+\s*", re.MULTILINE)
_EMPHASIS_PATTERN = re.compile(r"[*_]{1,2}([^*_]+)[*_]{1,2}")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_content(markdown: str) -> str:
    """Strip MDX/Markdown markup and collapse whitespace.

    >>> clean_content("# Title\\n\\nSee [the docs](/docs) for **more**.")
    'Title See the docs for more.'
    """
    text = _IMPORT_LINE_PATTERN.sub("", markdown)
    text = _TAG_PATTERN.sub(" ", text)
    text = _FENCED_CODE_PATTERN.sub(" ", text)
    text = _INLINE_CODE_PATTERN.sub(" ", text)
    text = _LINK_PATTERN.sub(r"\1", text)
    text = _HEADING_MARKER_PATTERN.sub("", text)
    text = _EMPHASIS_PATTERN.sub(r"\1", text)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def document_id(content_type: str, topic: str, slug: str) -> str:
    return f"{content_type}-{topic}-{slug}"


def document_url(content_type: str, topic: str, slug: str) -> str:
    return f"/{content_type}/{topic}/{slug}"


def to_epoch_millis(value: Any, *, now_ms: int) -> int:
    """Convert a front-matter ``date`` value to epoch milliseconds.

    Dates and naive datetimes are read as UTC. Numbers are taken as epoch
    milliseconds already. Missing, unparseable, non-finite, or out-of-range
    values (beyond +/- ``MAX_EPOCH_MILLIS``) fall back to ``now_ms``.
    """
    if value is None or isinstance(value, bool):
        return now_ms
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or abs(value) > MAX_EPOCH_MILLIS:
            logger.debug("Out-of-range date %r, using current time", value)
            return now_ms
        return int(value)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            logger.debug("Unparseable date %r, using current time", value)
            return now_ms
    try:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return int(value.timestamp() * 1000)
        if isinstance(value, date):
            return int(datetime(value.year, value.month, value.day, tzinfo=timezone.utc).timestamp() * 1000)
    except (OverflowError, ValueError, OSError):
        logger.debug("Unrepresentable date %r, using current time", value)
    return now_ms


@dataclass
class IndexBuildResult:
    """Outcome of an indexing run."""

    documents: list[SearchDocument] = field(default_factory=list)
    documents_skipped: int = 0
    errors: list[str] = field(default_factory=list)
    artifact_path: Path | None = None

    @property
    def documents_indexed(self) -> int:
        return len(self.documents)

    def counts_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for document in self.documents:
            counts[document.type] = counts.get(document.type, 0) + 1
        return counts


class SearchIndexer:
    """Turn a content source into a flat list of search documents."""

    def __init__(
        self,
        source: AbstractContentSource,
        store: IndexArtifactStore | None = None,
        *,
        max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_content_length < 1:
            raise ValueError("max_content_length must be positive")
        self.source = source
        self.store = store
        self.max_content_length = max_content_length
        self._clock = clock

    def build(
        self,
        content_types: Iterable[ContentType | str] = tuple(ContentType),
        *,
        persist: bool = True,
    ) -> IndexBuildResult:
        """Index every requested content type.

        Args:
            content_types: Content types to walk, in output order.
            persist: When True and a store is configured, rewrite the artifact
                with the result. When False the result stays in memory.
        """
        result = IndexBuildResult()
        seen_ids: set[str] = set()
        types = [ContentType(content_type) for content_type in content_types]

        with create_span("search.index.build", attributes={"search.content_types": [t.value for t in types]}):
            for content_type in types:
                before = result.documents_indexed
                self._index_type(content_type, result, seen_ids)
                logger.info(
                    "Indexed %d %s documents",
                    result.documents_indexed - before,
                    content_type.value,
                )

            if persist and self.store is not None:
                result.artifact_path = self.store.write(result.documents)

        return result

    def build_document(self, item: ContentItem, topic: TopicMetadata | None) -> SearchDocument:
        """Flatten one content item into a ``SearchDocument``."""
        metadata = item.metadata
        return SearchDocument(
            id=document_id(item.content_type, item.topic, item.slug),
            title=_text(metadata.get("title")),
            description=_text(metadata.get("description")),
            content=clean_content(item.body)[: self.max_content_length],
            topic=item.topic,
            topic_title=topic.title if topic is not None and topic.title else item.topic,
            type=item.content_type,
            url=document_url(item.content_type, item.topic, item.slug),
            date=to_epoch_millis(metadata.get("date"), now_ms=int(self._clock() * 1000)),
        )

    def _index_type(self, content_type: ContentType, result: IndexBuildResult, seen_ids: set[str]) -> None:
        def record_error(message: str) -> None:
            logger.warning("Failed to index %s", message)
            result.errors.append(message)
            INDEX_BUILD_ERRORS.labels(type=content_type.value).inc()

        def on_load_error(exc: DocumentLoadError) -> None:
            record_error(str(exc))

        for topic_slug, items in self.source.iter_topics(content_type, on_error=on_load_error):
            topic = self.source.load_topic_metadata(content_type, topic_slug)

            for item in items:
                if item.is_draft:
                    result.documents_skipped += 1
                    continue

                try:
                    document = self.build_document(item, topic)
                except (ValueError, OverflowError) as exc:
                    record_error(f"{item.path}: {exc}")
                    continue

                if document.id in seen_ids:
                    record_error(f"{item.path}: duplicate document id {document.id}")
                    continue

                seen_ids.add(document.id)
                result.documents.append(document)


def build_index(
    source: AbstractContentSource,
    store: IndexArtifactStore,
    content_types: Sequence[ContentType | str] = tuple(ContentType),
    *,
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
) -> IndexBuildResult:
    """Convenience wrapper: index ``content_types`` and rewrite the artifact."""
    indexer = SearchIndexer(source, store, max_content_length=max_content_length)
    return indexer.build(content_types)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
