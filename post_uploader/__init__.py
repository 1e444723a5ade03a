"""Post Uploader package.

Normalizes uploaded markdown files into Jekyll posts: completes their front
matter and stores them under a dated slug filename.

Requires Python 3.9 or higher.
"""

from .config import DEFAULT_CATEGORIES, DEFAULT_LAYOUT, Settings
from .front_matter import ScanState, has_front_matter, normalize, resolve_options
from .models import APIResponse, FileInfo, UploadOptions
from .storage import InvalidFilenameError, PostNotFoundError, PostStorage
from .utils import format_filename, get_date_string, slugify, title_from_filename

__all__ = [
    # Config
    "DEFAULT_CATEGORIES",
    "DEFAULT_LAYOUT",
    "Settings",
    # Front matter
    "ScanState",
    "has_front_matter",
    "normalize",
    "resolve_options",
    # Models
    "APIResponse",
    "FileInfo",
    "UploadOptions",
    # Storage
    "InvalidFilenameError",
    "PostNotFoundError",
    "PostStorage",
    # Utils
    "format_filename",
    "get_date_string",
    "slugify",
    "title_from_filename",
]
