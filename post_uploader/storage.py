"""File storage for normalized posts.

Posts are plain markdown files in a single Jekyll ``_posts`` directory.
Filenames are always resolved inside that directory; anything that would
escape it is rejected.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Union

from .config import MARKDOWN_SUFFIX
from .models import FileInfo

logger = logging.getLogger(__name__)

MARKDOWN_CONTENT_TYPE = "text/markdown"


class InvalidFilenameError(ValueError):
    """Raised when a filename is not a plain markdown name inside the posts directory."""


class PostNotFoundError(LookupError):
    """Raised when a requested post does not exist."""


def is_markdown_filename(filename: str) -> bool:
    """Whether a filename has a markdown suffix, ignoring case."""
    return filename.lower().endswith(MARKDOWN_SUFFIX)


class PostStorage:
    """Stores posts as files in a directory.

    Args:
        posts_dir: Directory holding the posts. Created by initialize().
    """

    def __init__(self, posts_dir: Union[str, Path]):
        self.posts_dir = Path(posts_dir)

    def initialize(self) -> None:
        """Create the posts directory if it does not exist."""
        self.posts_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Posts directory: {self.posts_dir}")

    def is_available(self) -> bool:
        """Whether the posts directory exists and is writable."""
        return self.posts_dir.is_dir() and os.access(self.posts_dir, os.W_OK)

    def _resolve(self, filename: str) -> Path:
        if not filename or filename != os.path.basename(filename) or filename in (".", ".."):
            raise InvalidFilenameError(f"Invalid filename: {filename!r}")
        if "\x00" in filename or "\\" in filename:
            raise InvalidFilenameError(f"Invalid filename: {filename!r}")
        return self.posts_dir / filename

    def save(self, filename: str, content: bytes, content_type: str = MARKDOWN_CONTENT_TYPE) -> FileInfo:
        """Write a post, replacing any existing file with the same name.

        Args:
            filename: Target filename inside the posts directory.
            content: Normalized post content.
            content_type: Content type reported back to the caller.

        Returns:
            FileInfo describing the written file.

        Raises:
            InvalidFilenameError: If the name is not a plain markdown name.
            OSError: If the file cannot be written.
        """
        path = self._resolve(filename)
        if not is_markdown_filename(filename):
            raise InvalidFilenameError(f"Not a markdown filename: {filename!r}")
        if path.exists():
            logger.warning(f"Overwriting existing post {filename}")

        path.write_bytes(content)
        logger.info(f"Saved post {filename} ({len(content)} bytes)")
        return FileInfo(
            filename=filename,
            size=len(content),
            upload_time=datetime.now(),
            content_type=content_type,
        )

    def list_posts(self) -> List[FileInfo]:
        """List stored markdown posts sorted by filename.

        Raises:
            OSError: If the directory cannot be read.
        """
        posts = []
        with os.scandir(self.posts_dir) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.is_dir() or not is_markdown_filename(entry.name):
                continue
            try:
                stat = entry.stat()
            except OSError as e:
                logger.warning(f"Skipping {entry.name}: {e}")
                continue
            posts.append(
                FileInfo(
                    filename=entry.name,
                    size=stat.st_size,
                    upload_time=datetime.fromtimestamp(stat.st_mtime),
                    content_type=MARKDOWN_CONTENT_TYPE,
                )
            )
        return posts

    def get_path(self, filename: str) -> Path:
        """Get the path of an existing post.

        Raises:
            InvalidFilenameError: If the name would escape the posts directory.
            PostNotFoundError: If no such file exists.
        """
        path = self._resolve(filename)
        if not path.is_file():
            raise PostNotFoundError(filename)
        return path

    def delete(self, filename: str) -> None:
        """Delete a post.

        Raises:
            InvalidFilenameError: If the name would escape the posts directory.
            PostNotFoundError: If no such file exists.
            OSError: If the file cannot be removed.
        """
        path = self.get_path(filename)
        path.unlink()
        logger.info(f"Deleted post {filename}")
