"""Content source abstractions and the filesystem implementation.

The content tree is laid out as ``{content_root}/{type}/{topic}/{slug}.md[x]``
with an optional ``_topic.yaml`` descriptor per topic directory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from site_search.domain.search import ContentType, TopicMetadata
from site_search.utils.front_matter import parse_front_matter


logger = logging.getLogger(__name__)

TOPIC_METADATA_FILENAME = "_topic.yaml"
CONTENT_SUFFIXES = (".md", ".mdx")


class DocumentLoadError(RuntimeError):
    """Raised when a single content item cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class ContentItem:
    """Raw content item: parsed front matter plus the unprocessed body."""

    content_type: str
    topic: str
    slug: str
    path: Path
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def is_draft(self) -> bool:
        return bool(self.metadata.get("draft"))


ErrorCallback = Callable[[DocumentLoadError], None]


class AbstractContentSource(ABC):
    """Supplies topics and their content items for a content type."""

    @abstractmethod
    def iter_topics(
        self,
        content_type: ContentType | str,
        *,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[tuple[str, list[ContentItem]]]:
        """Yield ``(topic_slug, items)`` pairs for a content type.

        Items that fail to load are reported to ``on_error`` and left out of
        the yielded list.
        """
        raise NotImplementedError

    @abstractmethod
    def load_topic_metadata(self, content_type: ContentType | str, topic_slug: str) -> TopicMetadata | None:
        """Return topic display metadata, or None when absent or malformed."""
        raise NotImplementedError

    def list_topics(self, content_type: ContentType | str) -> list[TopicMetadata]:
        """Return metadata for every topic of a content type that has a descriptor."""
        topics: list[TopicMetadata] = []
        for topic_slug, _ in self.iter_topics(content_type):
            metadata = self.load_topic_metadata(content_type, topic_slug)
            if metadata is not None:
                topics.append(metadata)
        return topics


class FilesystemContentSource(AbstractContentSource):
    """Reads Markdown/MDX content from a directory tree."""

    def __init__(self, content_root: Path | str) -> None:
        self.content_root = Path(content_root)

    def type_dir(self, content_type: ContentType | str) -> Path:
        return self.content_root / _type_value(content_type)

    def iter_topics(
        self,
        content_type: ContentType | str,
        *,
        on_error: ErrorCallback | None = None,
    ) -> Iterator[tuple[str, list[ContentItem]]]:
        base_dir = self.type_dir(content_type)
        if not base_dir.is_dir():
            logger.debug("Content directory missing: %s", base_dir)
            return

        for topic_dir in self._topic_dirs(base_dir):
            items: list[ContentItem] = []
            for path in self._content_files(topic_dir):
                try:
                    items.append(self.load_item(content_type, topic_dir.name, path))
                except DocumentLoadError as exc:
                    if on_error is None:
                        logger.warning("Skipping %s: %s", exc.path, exc.reason)
                    else:
                        on_error(exc)
            yield topic_dir.name, items

    def load_item(self, content_type: ContentType | str, topic_slug: str, path: Path) -> ContentItem:
        """Read and parse a single content file."""
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(path, f"unreadable: {exc}") from exc

        try:
            metadata, body = parse_front_matter(raw)
        except (yaml.YAMLError, ValueError) as exc:
            # PyYAML raises plain ValueError for calendar-invalid timestamps
            raise DocumentLoadError(path, f"invalid front matter: {exc}") from exc

        return ContentItem(
            content_type=_type_value(content_type),
            topic=topic_slug,
            slug=_slug_for(path),
            path=path,
            metadata=metadata,
            body=body,
        )

    def load_topic_metadata(self, content_type: ContentType | str, topic_slug: str) -> TopicMetadata | None:
        topic_path = self.type_dir(content_type) / topic_slug / TOPIC_METADATA_FILENAME
        try:
            data = yaml.safe_load(topic_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.debug("No topic metadata for %s/%s: %s", _type_value(content_type), topic_slug, exc)
            return None

        if not isinstance(data, dict):
            return None

        try:
            return TopicMetadata.model_validate({"slug": topic_slug, **_stringify_scalars(data)})
        except ValidationError as exc:
            logger.debug("Malformed topic metadata %s: %s", topic_path, exc)
            return None

    def list_topics(self, content_type: ContentType | str) -> list[TopicMetadata]:
        base_dir = self.type_dir(content_type)
        if not base_dir.is_dir():
            return []
        topics = (self.load_topic_metadata(content_type, topic_dir.name) for topic_dir in self._topic_dirs(base_dir))
        return [topic for topic in topics if topic is not None]

    @staticmethod
    def _topic_dirs(base_dir: Path) -> list[Path]:
        return sorted(
            (entry for entry in base_dir.iterdir() if entry.is_dir() and not entry.name.startswith((".", "_"))),
            key=lambda entry: entry.name,
        )

    @staticmethod
    def _content_files(topic_dir: Path) -> list[Path]:
        return sorted(
            (entry for entry in topic_dir.iterdir() if entry.is_file() and entry.suffix in CONTENT_SUFFIXES),
            key=lambda entry: entry.name,
        )


def _type_value(content_type: ContentType | str) -> str:
    return content_type.value if isinstance(content_type, ContentType) else str(content_type)


def _slug_for(path: Path) -> str:
    return path.name.removesuffix(path.suffix)


def _stringify_scalars(data: dict[str, Any]) -> dict[str, Any]:
    # Unquoted YAML values such as dates or numbers still display as text.
    return {str(key): value if value is None or isinstance(value, str) else str(value) for key, value in data.items()}
