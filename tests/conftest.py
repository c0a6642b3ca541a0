"""Shared test fixtures and configuration."""

from __future__ import annotations

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Complete test environment that overrides every config value
TEST_ENV = {
    "CONTENT_ROOT": "src/content",
    "SEARCH_INDEX_PATH": "public/search-index.json",
    "SEARCH_CONTENT_TYPES": "blog,docs",
    "SEARCH_MAX_CONTENT_LENGTH": "10000",
    "SEARCH_DEFAULT_LIMIT": "10",
    "SEARCH_MAX_RESULT_LIMIT": "50",
    "SEARCH_PRELOAD_INDEX": "false",
    "SEARCH_HOST": "127.0.0.1",
    "SEARCH_PORT": "4322",
    "LOG_LEVEL": "info",
    "LOG_JSON": "false",
    "OTLP_TRACES_ENDPOINT": "",
    "SERVICE_NAME": "site-search-test",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value

from site_search.domain.search import SearchDocument


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset config environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


def _make_document(
    doc_id: str = "docs-t-a",
    *,
    title: str = "",
    description: str = "",
    content: str = "",
    topic: str = "t",
    topic_title: str = "T",
    doc_type: str = "docs",
    url: str | None = None,
    date: int = 0,
) -> SearchDocument:
    return SearchDocument(
        id=doc_id,
        title=title,
        description=description,
        content=content,
        topic=topic,
        topic_title=topic_title,
        type=doc_type,
        url=url or f"/{doc_type}/{topic}/{doc_id}",
        date=date,
    )


def _write_post(
    content_root: Path,
    content_type: str,
    topic: str,
    slug: str,
    *,
    title: str = "Untitled",
    description: str = "",
    body: str = "Body text.",
    extra: str = "",
    suffix: str = ".md",
) -> Path:
    """Write a content file with front matter under ``content_root``."""
    path = content_root / content_type / topic / f"{slug}{suffix}"
    path.parent.mkdir(parents=True, exist_ok=True)
    front_matter = f"title: {title}\ndescription: {description}\n{extra}"
    path.write_text(f"---\n{front_matter.rstrip()}\n---\n{body}\n", encoding="utf-8")
    return path


def _write_topic(content_root: Path, content_type: str, topic: str, text: str) -> Path:
    path = content_root / content_type / topic / "_topic.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def make_document():
    """Factory for in-memory ``SearchDocument`` instances."""
    return _make_document


@pytest.fixture
def write_post():
    """Factory that writes a content file with front matter."""
    return _write_post


@pytest.fixture
def write_topic():
    """Factory that writes a topic's ``_topic.yaml``."""
    return _write_topic
