"""Dependency injection for the API layer.

This module provides the settings, post storage and API key check used by
the routes.
"""

import hmac
import logging
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status

from ..config import Settings
from ..storage import PostStorage

logger = logging.getLogger(__name__)

# Global instances (can be replaced for testing)
_settings: Optional[Settings] = None
_storage: Optional[PostStorage] = None


def get_settings() -> Settings:
    """Get the service settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_storage() -> Generator[PostStorage, None, None]:
    """Get the post storage instance.

    This is a FastAPI dependency that provides the storage. The posts
    directory is created the first time storage is requested.
    """
    global _storage
    if _storage is None:
        _storage = PostStorage(get_settings().posts_dir)
        _storage.initialize()
    yield _storage


def require_api_key(
    x_api_key: Optional[str] = Header(None, description="API key for authentication"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject requests whose X-API-Key header does not match the configured key."""
    provided = (x_api_key or "").encode("utf-8")
    expected = settings.api_key.encode("utf-8")
    if not hmac.compare_digest(provided, expected):
        logger.warning("Rejected request with invalid API key")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def set_settings(settings: Settings) -> None:
    """Set the settings instance (for testing)."""
    global _settings
    _settings = settings


def set_storage(storage: PostStorage) -> None:
    """Set the storage instance (for testing)."""
    global _storage
    _storage = storage


def reset_dependencies() -> None:
    """Reset all dependencies to None (for testing)."""
    global _settings, _storage
    _settings = None
    _storage = None
