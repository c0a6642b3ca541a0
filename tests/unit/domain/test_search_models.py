"""Unit tests for search domain models."""

from pydantic import ValidationError
import pytest

from site_search.domain.search import ContentType, SearchDocument, SearchOptions, TopicMetadata


class TestContentType:
    @pytest.mark.parametrize("value", ["blog", "Blog", " BLOG "])
    def test_parse_normalizes(self, value):
        assert ContentType.parse(value) is ContentType.BLOG

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="expected one of: blog, docs"):
            ContentType.parse("podcast")


class TestSearchDocument:
    def test_accepts_both_key_styles(self):
        by_alias = SearchDocument.model_validate(
            {"id": "x", "topic": "t", "topicTitle": "T", "type": "docs", "url": "/x", "date": 1}
        )
        by_name = SearchDocument(id="x", topic="t", topic_title="T", type=ContentType.DOCS, url="/x", date=1)

        assert by_alias == by_name
        assert by_name.type == "docs"

    def test_artifact_keys(self, make_document):
        artifact = make_document(title="Rust").to_artifact()

        assert "topicTitle" in artifact
        assert "topic_title" not in artifact

    def test_frozen(self, make_document):
        document = make_document()

        with pytest.raises(ValidationError):
            document.title = "changed"


class TestSearchOptions:
    def test_defaults(self):
        assert SearchOptions() == SearchOptions(type=None, limit=10)

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            SearchOptions(limit=0)


def test_topic_metadata_ignores_unknown_keys():
    topic = TopicMetadata.model_validate({"slug": "rust", "title": "Rust", "order": 3})

    assert topic.model_dump() == {"slug": "rust", "title": "Rust", "description": "", "banner": None}
