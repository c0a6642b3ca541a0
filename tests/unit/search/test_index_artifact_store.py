"""Unit tests for the JSON index artifact store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from site_search.search.storage import IndexArtifactError, IndexArtifactStore


def test_write_uses_artifact_key_names(tmp_path: Path, make_document):
    store = IndexArtifactStore(tmp_path / "public" / "search-index.json")

    path = store.write([make_document("docs-t-a", title="Rust", topic_title="Systems")])

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload == [
        {
            "id": "docs-t-a",
            "title": "Rust",
            "description": "",
            "content": "",
            "topic": "t",
            "topicTitle": "Systems",
            "type": "docs",
            "url": "/docs/t/docs-t-a",
            "date": 0,
        }
    ]


def test_write_replaces_previous_content(tmp_path: Path, make_document):
    store = IndexArtifactStore(tmp_path / "search-index.json")
    store.write([make_document("docs-t-a"), make_document("docs-t-b")])

    store.write([make_document("docs-t-c")])

    assert [document.id for document in store.read()] == ["docs-t-c"]
    assert not (tmp_path / ".search-index.json.tmp").exists()


def test_read_accepts_artifacts_written_elsewhere(tmp_path: Path):
    path = tmp_path / "search-index.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "blog-life-hello",
                    "title": "Hello",
                    "description": "First post",
                    "content": "Welcome",
                    "topic": "life",
                    "topicTitle": "Life",
                    "type": "blog",
                    "url": "/blog/life/hello",
                    "date": 1704067200000,
                }
            ]
        ),
        encoding="utf-8",
    )

    (document,) = IndexArtifactStore(path).read()

    assert document.topic_title == "Life"
    assert document.type == "blog"
    assert document.date == 1704067200000


def test_read_missing_file_raises(tmp_path: Path):
    with pytest.raises(IndexArtifactError, match="not found"):
        IndexArtifactStore(tmp_path / "missing.json").read()


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        '{"id": "x"}',
        '[{"id": "x", "type": "podcast"}]',
    ],
)
def test_read_malformed_file_raises(tmp_path: Path, payload: str):
    path = tmp_path / "search-index.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(IndexArtifactError):
        IndexArtifactStore(path).read()


def test_write_unserializable_payload_raises(tmp_path: Path, make_document):
    store = IndexArtifactStore(tmp_path / "search-index.json")

    with pytest.raises(IndexArtifactError, match="serialize"):
        store.write([make_document(date=10**23)])

    assert not store.exists()
