"""Search service orchestration layer.

Owns the process-wide engine instance, performs the lazy first load of the
index artifact, validates request options, and records metrics around each
query. Request handlers receive the service by reference instead of reaching
for module-level state.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

import anyio

from site_search.adapters.content_source import AbstractContentSource
from site_search.domain.search import ContentType, SearchDocument, SearchOptions, SearchResult
from site_search.observability.metrics import (
    INDEX_DOC_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    SEARCH_RESULTS,
    track_latency,
)
from site_search.observability.tracing import create_span
from site_search.search.engine import FuzzySearchEngine
from site_search.search.storage import IndexArtifactStore


logger = logging.getLogger(__name__)


class InvalidSearchOptionsError(ValueError):
    """Raised when request parameters cannot be turned into search options."""


class SearchService:
    """High-level search API for the HTTP layer and CLI."""

    def __init__(
        self,
        engine: FuzzySearchEngine,
        store: IndexArtifactStore,
        *,
        content_source: AbstractContentSource | None = None,
        default_limit: int = 10,
        max_limit: int = 50,
    ) -> None:
        self.engine = engine
        self.store = store
        self.content_source = content_source
        self.default_limit = default_limit
        self.max_limit = max_limit

    def ensure_loaded(self) -> int:
        """Load the artifact into the engine if nothing is resident yet."""
        count = self.engine.load(self.store)
        INDEX_DOC_COUNT.set(count)
        return count

    async def ensure_loaded_async(self) -> int:
        """Like ``ensure_loaded`` but reads the artifact off the event loop."""
        if self.engine.is_loaded:
            return len(self.engine)
        return await anyio.to_thread.run_sync(self.ensure_loaded)

    def set_index(self, documents: Iterable[SearchDocument]) -> None:
        """Replace the resident documents, overriding any earlier load."""
        self.engine.set_index(documents)
        INDEX_DOC_COUNT.set(len(self.engine))

    def build_options(self, content_type: str | None = None, limit: str | int | None = None) -> SearchOptions:
        """Validate raw request parameters.

        Raises:
            InvalidSearchOptionsError: Unknown content type or non-positive/non-integer limit.
        """
        resolved_type: ContentType | None = None
        if content_type:
            try:
                resolved_type = ContentType.parse(content_type)
            except ValueError as exc:
                raise InvalidSearchOptionsError(str(exc)) from exc

        resolved_limit = self.default_limit
        if limit is not None and limit != "":
            try:
                resolved_limit = int(limit)
            except (TypeError, ValueError) as exc:
                raise InvalidSearchOptionsError(f"Invalid limit: {limit!r}") from exc
            if resolved_limit < 1:
                raise InvalidSearchOptionsError(f"Invalid limit: {limit!r}")

        return SearchOptions(type=resolved_type, limit=min(resolved_limit, self.max_limit))

    def search(self, query: str | None, options: SearchOptions | None = None) -> list[SearchResult]:
        """Run one query against the resident index."""
        if not query or not query.strip():
            return []

        options = options or SearchOptions(limit=self.default_limit)
        type_label = options.type or "all"
        SEARCH_REQUESTS.labels(type=type_label).inc()

        with (
            create_span("search.query", attributes={"search.type": type_label, "search.limit": options.limit}) as span,
            track_latency(SEARCH_LATENCY),
        ):
            results = self.engine.search(query, options)
            span.set_attribute("search.results", len(results))

        SEARCH_RESULTS.observe(len(results))
        logger.debug("Search returned %d results (type=%s, limit=%d)", len(results), type_label, options.limit)
        return results

    def list_topics(self, content_type: ContentType | None = None) -> list[dict]:
        """Topics with metadata for one content type, or all of them."""
        if self.content_source is None:
            return []

        types = [content_type] if content_type else list(ContentType)
        topics: list[dict] = []
        for entry in types:
            for topic in self.content_source.list_topics(entry):
                topics.append({"type": ContentType(entry).value, **topic.model_dump()})
        return topics

    def health(self) -> dict:
        return {
            "status": "healthy" if self.engine.is_loaded else "empty",
            "documents": len(self.engine),
            "index_path": str(self.store.path),
            "index_present": self.store.exists(),
        }
