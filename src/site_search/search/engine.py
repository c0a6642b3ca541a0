"""In-memory fuzzy query engine.

``SearchBackend`` is the seam for swapping ranking strategies;
``FuzzySearchEngine`` is the local implementation that scores every resident
document on each query. The document list is only ever replaced wholesale
(``load``/``index``/``clear``), never mutated in place, so concurrent readers
always see a complete list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
import logging

from site_search.domain.search import SearchDocument, SearchOptions, SearchResult
from site_search.search.fuzzy import fuzzy_score
from site_search.search.snippet import highlight_excerpt
from site_search.search.storage import IndexArtifactError, IndexArtifactStore


logger = logging.getLogger(__name__)

TITLE_WEIGHT = 3.0
DESCRIPTION_WEIGHT = 2.0
TOPIC_WEIGHT = 1.5
CONTENT_WEIGHT = 1.0
MIN_COMBINED_SCORE = 0.3


class SearchBackend(ABC):
    """Ranking strategy over a set of search documents."""

    @abstractmethod
    def index(self, documents: Iterable[SearchDocument]) -> None:
        """Replace the searchable document set."""
        raise NotImplementedError

    @abstractmethod
    def search(self, query: str, options: SearchOptions | None = None) -> list[SearchResult]:
        """Return ranked results for ``query``."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        """Drop every document."""
        raise NotImplementedError


def combined_score(query: str, document: SearchDocument) -> float:
    """Weighted sum of the per-field fuzzy scores for one document."""
    return (
        fuzzy_score(query, document.title) * TITLE_WEIGHT
        + fuzzy_score(query, document.description) * DESCRIPTION_WEIGHT
        + fuzzy_score(query, document.topic_title) * TOPIC_WEIGHT
        + fuzzy_score(query, document.content) * CONTENT_WEIGHT
    )


class FuzzySearchEngine(SearchBackend):
    """Score-everything fuzzy search over an in-memory document list."""

    def __init__(self, documents: Iterable[SearchDocument] | None = None) -> None:
        self._documents: tuple[SearchDocument, ...] = tuple(documents or ())

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def documents(self) -> Sequence[SearchDocument]:
        return self._documents

    @property
    def is_loaded(self) -> bool:
        return bool(self._documents)

    def load(self, store: IndexArtifactStore) -> int:
        """Populate the index from the artifact unless documents are already resident.

        A missing or malformed artifact leaves the index empty; queries then
        return no results instead of failing.

        Returns:
            Number of resident documents after the call.
        """
        if self._documents:
            return len(self._documents)

        try:
            documents = store.read()
        except IndexArtifactError as exc:
            logger.warning("Search index not available, search will be empty: %s", exc)
            return 0

        self._documents = tuple(documents)
        logger.info("Loaded %d search documents from %s", len(self._documents), store.path)
        return len(self._documents)

    def index(self, documents: Iterable[SearchDocument]) -> None:
        self._documents = tuple(documents)

    set_index = index

    def clear(self) -> None:
        self._documents = ()

    def search(self, query: str, options: SearchOptions | None = None) -> list[SearchResult]:
        """Rank resident documents against ``query``.

        Documents whose combined score does not exceed ``MIN_COMBINED_SCORE``
        are dropped. Equal scores keep index order (the sort is stable).
        """
        options = options or SearchOptions()
        documents = self._documents

        if not query.strip() or not documents:
            return []

        scored: list[tuple[float, SearchDocument]] = []
        for document in documents:
            if options.type and document.type != options.type:
                continue

            score = combined_score(query, document)
            if score > MIN_COMBINED_SCORE:
                scored.append((score, document))

        scored.sort(key=lambda entry: entry[0], reverse=True)

        return [
            SearchResult(
                id=document.id,
                title=document.title,
                excerpt=highlight_excerpt(document.description or document.content, query),
                topic=document.topic_title,
                type=document.type,
                url=document.url,
                score=score,
            )
            for score, document in scored[: options.limit]
        ]
