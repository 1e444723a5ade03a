"""Tests for slug and filename helpers."""

import re
from datetime import date

import pytest

from post_uploader import format_filename, get_date_string, slugify, title_from_filename
from post_uploader.utils import strip_markdown_suffix

CANONICAL_FILENAME = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}-[a-z0-9-]+\.md$")


def test_get_date_string():
    """Test date string format."""
    assert get_date_string(date(2024, 1, 5)) == "2024-01-05"
    assert re.match(r"^\d{4}-\d{2}-\d{2}$", get_date_string())


def test_strip_markdown_suffix():
    assert strip_markdown_suffix("post.md") == "post"
    assert strip_markdown_suffix("post.md.md") == "post.md"
    assert strip_markdown_suffix("post.MD") == "post.MD"
    assert strip_markdown_suffix("post") == "post"


def test_title_from_filename():
    """Test display titles derived from filenames."""
    assert title_from_filename("my-first-post.md") == "My First Post"
    assert title_from_filename("hello world.md") == "Hello World"
    assert title_from_filename("2nd-try.md") == "2nd Try"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hello World", "hello-world"),
        ("Hello, World!!", "hello-world"),
        ("AI & Machine Learning", "ai-machine-learning"),
        ("one\ttwo\nthree", "one-two-three"),
        ("--Leading and trailing--", "leading-and-trailing"),
        ("Café déjà vu", "caf-dj-vu"),
        ("a\u00a0b", "ab"),
        ("   ", ""),
    ],
)
def test_slugify(text, expected):
    """Test slugify function."""
    assert slugify(text) == expected


def test_slugify_keeps_hyphen_runs_from_punctuation():
    """Test that hyphens produced around removed punctuation are not collapsed."""
    assert slugify("A - B") == "a---b"
    assert slugify("x -- y") == "x----y"


class TestFormatFilename:
    """Tests for canonical post filenames."""

    def test_falls_back_to_filename(self):
        """Test that the original name is used when no title is given."""
        assert format_filename("my-first-post.md", "", "", today=date(2024, 3, 26)) == "2024-03-26-my-first-post.md"

    def test_defaults_to_today(self, monkeypatch):
        """Test that today's date is used when no date is given."""
        monkeypatch.setattr("post_uploader.utils.current_date", lambda: date(2024, 3, 26))
        assert format_filename("my-first-post.md") == "2024-03-26-my-first-post.md"

    def test_title_is_slugified(self):
        assert format_filename("x.md", "Hello, World!!", "2024-03-26") == "2024-03-26-hello-world.md"

    def test_blank_title_gives_empty_slug(self):
        """Test that a whitespace-only title produces an empty slug."""
        assert format_filename("x.md", "   ", "2024-01-01") == "2024-01-01-.md"

    def test_fallback_name_is_slugified(self):
        assert format_filename("My Notes (draft).md", "", "2024-01-01") == "2024-01-01-my-notes-draft.md"

    def test_date_used_verbatim(self):
        assert format_filename("x.md", "Title", "someday") == "someday-title.md"

    @pytest.mark.parametrize(
        "original, title",
        [
            ("my-first-post.md", ""),
            ("x.md", "Why I Switched to Python 3.12!"),
            ("x.md", "  Spaces   everywhere  "),
            ("UPPER-CASE.md", ""),
        ],
    )
    def test_matches_canonical_pattern(self, original, title):
        """Test that well-formed inputs produce canonical filenames."""
        filename = format_filename(original, title, "2024-03-26")
        assert CANONICAL_FILENAME.match(filename)
        slug = filename[len("2024-03-26-") : -len(".md")]
        assert not slug.startswith("-")
        assert not slug.endswith("-")
