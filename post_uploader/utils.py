"""Utility functions for the Post Uploader."""

import re
from datetime import date
from typing import Optional

from .config import DATE_FORMAT, MARKDOWN_SUFFIX

# ASCII whitespace only, so non-ASCII spaces are stripped rather than hyphenated
_DISALLOWED_CHARS = re.compile(r"[^a-z0-9 \t\n\r\f-]")
_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")
_WORD_START = re.compile(r"(?<!\w)\w")


def current_date() -> date:
    """Get the current local date."""
    return date.today()


def get_date_string(today: Optional[date] = None) -> str:
    """Get a date as a string for front matter and filenames.

    Args:
        today: Date to format. Defaults to the current local date.

    Returns:
        Date in YYYY-MM-DD format.
    """
    return (today or current_date()).strftime(DATE_FORMAT)


def strip_markdown_suffix(name: str) -> str:
    """Remove a single trailing '.md' from a filename."""
    if name.endswith(MARKDOWN_SUFFIX):
        return name[: -len(MARKDOWN_SUFFIX)]
    return name


def title_from_filename(filename: str) -> str:
    """Derive a display title from a post filename.

    'my-first-post.md' becomes 'My First Post'. Only the first letter of
    each word is upper-cased; the rest of the word is left as is.
    """
    words = strip_markdown_suffix(filename).replace("-", " ")
    return _WORD_START.sub(lambda m: m.group(0).upper(), words)


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated ASCII slug.

    Characters other than ASCII letters, digits, whitespace and hyphens are
    dropped before whitespace runs become hyphens, so 'a - b' yields 'a---b'.

    Args:
        text: The text to convert to a slug.

    Returns:
        The slug, possibly empty.
    """
    slug = _DISALLOWED_CHARS.sub("", text.lower())
    slug = _WHITESPACE_RUN.sub("-", slug)
    return slug.strip("-")


def format_filename(original_name: str, title: str = "", date_str: str = "", today: Optional[date] = None) -> str:
    """Generate the canonical filename for a post.

    Args:
        original_name: The uploaded filename, used when no title is given.
        title: The post title.
        date_str: The post date. Defaults to today's date.
        today: Date used when date_str is empty.

    Returns:
        A filename in the format 'YYYY-MM-DD-slug.md'. A title that slugifies
        to nothing yields 'YYYY-MM-DD-.md'.
    """
    raw_title = title or strip_markdown_suffix(original_name)
    slug = slugify(raw_title)
    effective_date = date_str or get_date_string(today)
    return f"{effective_date}-{slug}{MARKDOWN_SUFFIX}"
