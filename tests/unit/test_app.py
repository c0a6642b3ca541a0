"""HTTP endpoint tests using Starlette's TestClient."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from starlette.testclient import TestClient

from site_search.app import build_search_service, create_app
from site_search.config import Settings
from site_search.search.storage import IndexArtifactStore


@pytest.fixture
def settings(tmp_path: Path, content_root: Path) -> Settings:
    return Settings(
        content_root=content_root,
        search_index_path=tmp_path / "public" / "search-index.json",
    )


@pytest.fixture
def indexed(settings: Settings, make_document):
    IndexArtifactStore(settings.search_index_path).write(
        [
            make_document("docs-rust-ownership", title="Rust Ownership", description="Borrowing explained"),
            make_document("blog-life-rust", title="Learning Rust", doc_type="blog", topic="life"),
            make_document("docs-go-channels", title="Go Channels", topic="go"),
        ]
    )
    return settings


@pytest.fixture
def client(indexed: Settings):
    with TestClient(create_app(indexed)) as test_client:
        yield test_client


@pytest.mark.parametrize("path", ["/api/search", "/api/search?q=", "/api/search?q=%20%20"])
def test_missing_query_returns_empty_list(client: TestClient, path: str):
    response = client.get(path)

    assert response.status_code == 200
    assert response.json() == []


def test_search_returns_ranked_results(client: TestClient):
    response = client.get("/api/search", params={"q": "rust"})

    assert response.status_code == 200
    results = response.json()
    assert [result["id"] for result in results] == ["docs-rust-ownership", "blog-life-rust"]
    assert set(results[0]) == {"id", "title", "excerpt", "topic", "type", "url", "score"}
    assert results[0]["excerpt"] == "Borrowing explained"
    assert results[0]["url"] == "/docs/t/docs-rust-ownership"


def test_search_type_filter_and_limit(client: TestClient):
    response = client.get("/api/search", params={"q": "rust", "type": "blog", "limit": "1"})

    assert [result["id"] for result in response.json()] == ["blog-life-rust"]


@pytest.mark.parametrize("params", [{"type": "podcast"}, {"limit": "0"}, {"limit": "many"}])
def test_invalid_options_rejected(client: TestClient, params: dict):
    response = client.get("/api/search", params={"q": "rust", **params})

    assert response.status_code == 400
    assert "error" in response.json()


def test_search_failure_returns_500(client: TestClient):
    with patch.object(client.app.state.search_service.engine, "search", side_effect=RuntimeError("boom")):
        response = client.get("/api/search", params={"q": "rust"})

    assert response.status_code == 500
    assert response.json() == {"error": "Search failed"}


def test_missing_artifact_serves_empty_results(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        response = test_client.get("/api/search", params={"q": "rust"})

    assert response.status_code == 200
    assert response.json() == []


def test_index_loaded_lazily_on_first_query(client: TestClient):
    assert client.get("/health").json()["status"] == "empty"

    client.get("/api/search", params={"q": "rust"})

    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["documents"] == 3
    assert health["index_present"] is True


def test_preload_index_at_startup(indexed: Settings):
    settings = indexed.model_copy(update={"search_preload_index": True})

    with TestClient(create_app(settings)) as test_client:
        assert test_client.get("/health").json()["documents"] == 3


def test_injected_service_is_used(indexed: Settings, make_document):
    service = build_search_service(indexed)
    service.set_index([make_document("docs-t-x", title="Injected")])

    with TestClient(create_app(indexed, service)) as test_client:
        results = test_client.get("/api/search", params={"q": "injected"}).json()

    assert [result["id"] for result in results] == ["docs-t-x"]


def test_topics_endpoint(settings: Settings, content_root: Path, write_topic):
    write_topic(content_root, "docs", "rust", "title: Rust\n")
    write_topic(content_root, "blog", "life", "title: Life\n")

    with TestClient(create_app(settings)) as test_client:
        all_topics = test_client.get("/api/topics").json()
        docs_topics = test_client.get("/api/topics", params={"type": "docs"}).json()
        bad = test_client.get("/api/topics", params={"type": "podcast"})

    assert [topic["slug"] for topic in all_topics] == ["life", "rust"]
    assert docs_topics == [{"type": "docs", "slug": "rust", "title": "Rust", "description": "", "banner": None}]
    assert bad.status_code == 400


def test_metrics_endpoint(client: TestClient):
    client.get("/api/search", params={"q": "rust"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "search_requests_total" in response.text
    assert "search_latency_seconds" in response.text
