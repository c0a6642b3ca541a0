"""Unit tests for YAML front matter parsing."""

from datetime import date

import pytest

from site_search.utils.front_matter import parse_front_matter


@pytest.mark.unit
class TestParseFrontMatter:
    def test_basic(self):
        metadata, body = parse_front_matter("---\ntitle: Hello\ndraft: false\n---\n# Body\n")

        assert metadata == {"title": "Hello", "draft": False}
        assert body == "# Body\n"

    def test_dates_are_parsed_by_yaml(self):
        metadata, _ = parse_front_matter("---\ndate: 2024-01-15\n---\n")

        assert metadata["date"] == date(2024, 1, 15)

    def test_windows_line_endings(self):
        metadata, body = parse_front_matter("---\r\ntitle: Hello\r\n---\r\nBody")

        assert metadata == {"title": "Hello"}
        assert body == "Body"

    def test_byte_order_mark(self):
        metadata, body = parse_front_matter("\ufeff---\ntitle: Hello\n---\nBody")

        assert metadata == {"title": "Hello"}
        assert body == "Body"

    def test_no_front_matter(self):
        content = "# Just markdown\n\n---\n\nwith a rule"

        assert parse_front_matter(content) == ({}, content)

    def test_empty_front_matter(self):
        assert parse_front_matter("---\n\n---\nBody") == ({}, "Body")

    def test_invalid_yaml_keeps_content(self):
        content = "---\ntitle: [unclosed\n---\nBody"

        assert parse_front_matter(content) == ({}, content)

    def test_non_mapping_yaml_keeps_content(self):
        content = "---\n- a\n- b\n---\nBody"

        assert parse_front_matter(content) == ({}, content)


    def test_calendar_invalid_date_raises(self):
        with pytest.raises(ValueError):
            parse_front_matter("---\ndate: 2024-13-45\n---\nBody")
