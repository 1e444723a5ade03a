"""Front matter normalization for uploaded markdown posts.

A post either starts with a front matter block::

    ---
    layout: page
    title: My Post
    ---

or has none. ``normalize`` adds a complete block to documents without one
and appends the missing ``layout``, ``title``, ``date`` and ``categories``
fields to documents that have one. Existing lines are copied byte for byte
and never rewritten. The block itself is not parsed as YAML; a field counts
as present when some header line starts with ``<field>:``.

Everything here works on bytes so arbitrary (non UTF-8, binary) uploads pass
through unchanged.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Set

from .config import DEFAULT_CATEGORIES, DEFAULT_LAYOUT
from .models import UploadOptions
from .utils import get_date_string, title_from_filename

logger = logging.getLogger(__name__)

DELIMITER = b"---"

# Order used when a fresh front matter block is generated
FIELD_ORDER = ("layout", "title", "date", "categories")


class ScanState(str, Enum):
    """Position of the scanner relative to the front matter block."""

    IN_HEADER = "in_header"
    IN_BODY = "in_body"


@dataclass
class ScanResult:
    """Outcome of scanning a document that opens with a delimiter.

    Attributes:
        header_lines: Lines after the opening delimiter, up to and including
            the closing delimiter when there is one.
        body_lines: Lines after the closing delimiter.
        present: Recognized fields found in the header.
        state: Scanner state after the last line. IN_HEADER means the
            block was never closed.
    """

    header_lines: List[bytes] = field(default_factory=list)
    body_lines: List[bytes] = field(default_factory=list)
    present: Set[str] = field(default_factory=set)
    state: ScanState = ScanState.IN_HEADER

    @property
    def closed(self) -> bool:
        return self.state == ScanState.IN_BODY

    def missing(self) -> List[str]:
        return [name for name in FIELD_ORDER if name not in self.present]


def resolve_options(
    options: Optional[UploadOptions],
    original_filename: str,
    today: Optional[date] = None,
) -> UploadOptions:
    """Fill empty upload options with their defaults.

    Args:
        options: Values supplied with the upload, if any.
        original_filename: Uploaded filename, used to derive a title.
        today: Date used when no date was supplied.

    Returns:
        A new UploadOptions with every field populated.
    """
    options = options or UploadOptions()
    # fields are already strings; skip validation so any filename text is accepted
    return UploadOptions.model_construct(
        layout=options.layout or DEFAULT_LAYOUT,
        title=options.title or title_from_filename(original_filename),
        date=options.date or get_date_string(today),
        categories=list(options.categories) or list(DEFAULT_CATEGORIES),
    )


def render_field(name: str, options: UploadOptions) -> bytes:
    """Render a single front matter line, without the line terminator."""
    if name == "categories":
        value = "[" + ", ".join(options.categories) + "]"
    else:
        value = getattr(options, name)
    return f"{name}: {value}".encode("utf-8", errors="replace")


def render_front_matter(options: UploadOptions) -> bytes:
    """Render a complete front matter block followed by one blank line."""
    lines = [DELIMITER] + [render_field(name, options) for name in FIELD_ORDER] + [DELIMITER]
    return b"\n".join(lines) + b"\n\n"


def split_lines(content: bytes) -> List[bytes]:
    """Split content into lines without terminators.

    A final newline does not start an extra empty line, and a trailing
    carriage return is dropped from every line.
    """
    if not content:
        return []
    lines = content.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [line[:-1] if line.endswith(b"\r") else line for line in lines]


def has_front_matter(content: bytes) -> bool:
    """Whether the first line of content is a front matter delimiter."""
    first_line = content.split(b"\n", 1)[0]
    return first_line.strip() == DELIMITER


def scan_front_matter(content: bytes) -> ScanResult:
    """Split a document that opens with a delimiter into header and body.

    The opening delimiter line is consumed. Header lines are copied up to and
    including the first line that is exactly ``---``; everything after it is
    body. If no closing delimiter exists, every line belongs to the header.
    """
    result = ScanResult()
    for line in split_lines(content)[1:]:
        if result.state == ScanState.IN_BODY:
            result.body_lines.append(line)
            continue

        result.header_lines.append(line)
        if line == DELIMITER:
            result.state = ScanState.IN_BODY
            continue
        for name in FIELD_ORDER:
            if line.startswith(name.encode("ascii") + b":"):
                result.present.add(name)
    return result


def normalize(
    content: bytes,
    options: Optional[UploadOptions],
    original_filename: str,
    today: Optional[date] = None,
    insert_inside_header: bool = False,
) -> bytes:
    """Ensure a markdown document carries complete front matter.

    Documents without front matter get a generated block, a blank line, and
    then their original bytes unchanged. Documents with front matter keep
    every existing line; missing fields are appended after the copied header
    lines, which places them after the closing delimiter unless
    insert_inside_header is set.

    Args:
        content: Raw document bytes.
        options: Desired field values; empty values fall back to defaults.
        original_filename: Uploaded filename, used to derive a default title.
        today: Date used when no date was supplied.
        insert_inside_header: Put missing fields before the closing
            delimiter so the result stays a valid front matter block.

    Returns:
        The normalized document.
    """
    resolved = resolve_options(options, original_filename, today)

    if not has_front_matter(content):
        logger.debug(f"No front matter in {original_filename!r}, generating one")
        return render_front_matter(resolved) + content

    scan = scan_front_matter(content)
    missing = scan.missing()
    if not scan.closed:
        logger.warning(f"Front matter in {original_filename!r} is never closed")
    if missing:
        logger.debug(f"Adding front matter fields {missing} to {original_filename!r}")

    added = [render_field(name, resolved) for name in missing]
    header = scan.header_lines
    if insert_inside_header and scan.closed:
        header = header[:-1] + added + header[-1:]
    else:
        header = header + added

    out = [DELIMITER] + header + scan.body_lines
    return b"".join(line + b"\n" for line in out)
