"""API layer for the Post Uploader.

This module provides the RESTful endpoints for uploading and managing
markdown posts.
"""

from .app import create_app
from .dependencies import get_settings, get_storage, require_api_key
from .routes import router

__all__ = [
    "create_app",
    "router",
    "get_settings",
    "get_storage",
    "require_api_key",
]
