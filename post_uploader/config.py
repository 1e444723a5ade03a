"""Configuration settings for the Post Uploader."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Front matter defaults
DEFAULT_LAYOUT: str = "page"
DEFAULT_CATEGORIES: List[str] = ["blog"]

# Date format used for front matter dates and filename prefixes
DATE_FORMAT: str = "%Y-%m-%d"

# Only markdown uploads are accepted
MARKDOWN_SUFFIX: str = ".md"

# Maximum accepted upload size (10 MiB)
MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

# Header carrying the API key
API_KEY_HEADER: str = "X-API-Key"

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8080

# Jekyll posts directory used when POSTS_DIR is unset
DEFAULT_POSTS_DIR: str = str(Path.home() / "blog" / "_posts")

_TRUTHY = {"1", "true", "yes", "on"}


def load_env(dotenv_path: Optional[str] = None) -> bool:
    """Load variables from a .env file into the process environment.

    Existing environment variables are not overridden.

    Returns:
        True if a .env file was found and loaded.
    """
    loaded = load_dotenv(dotenv_path=dotenv_path, override=False)
    if not loaded:
        logger.warning(".env file not found, using environment and defaults")
    return loaded


def get_env(key: str, default: str) -> str:
    """Get an environment variable, treating empty values as unset."""
    value = os.environ.get(key, "")
    if value == "":
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the upload service.

    Attributes:
        posts_dir: Directory where normalized posts are written.
        api_key: Expected value of the X-API-Key header.
        port: Port the server listens on.
        max_upload_size: Maximum accepted upload size in bytes.
        insert_missing_inside_header: Insert missing front matter fields
            before the closing delimiter instead of after it.
    """

    posts_dir: str = DEFAULT_POSTS_DIR
    api_key: str = ""
    port: int = DEFAULT_PORT
    max_upload_size: int = MAX_UPLOAD_SIZE
    insert_missing_inside_header: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Reads POSTS_DIR, API_KEY, PORT, MAX_UPLOAD_SIZE and
        INSERT_MISSING_INSIDE_HEADER.
        """
        port = get_env("PORT", str(DEFAULT_PORT))
        max_size = get_env("MAX_UPLOAD_SIZE", str(MAX_UPLOAD_SIZE))
        try:
            port_value = int(port)
        except ValueError:
            logger.warning(f"Invalid PORT {port!r}, using {DEFAULT_PORT}")
            port_value = DEFAULT_PORT
        try:
            max_size_value = int(max_size)
        except ValueError:
            logger.warning(f"Invalid MAX_UPLOAD_SIZE {max_size!r}, using {MAX_UPLOAD_SIZE}")
            max_size_value = MAX_UPLOAD_SIZE

        return cls(
            posts_dir=os.path.expanduser(get_env("POSTS_DIR", DEFAULT_POSTS_DIR)),
            api_key=os.environ.get("API_KEY", ""),
            port=port_value,
            max_upload_size=max_size_value,
            insert_missing_inside_header=get_env("INSERT_MISSING_INSIDE_HEADER", "false").lower() in _TRUTHY,
        )
