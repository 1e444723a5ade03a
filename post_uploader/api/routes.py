"""API routes for the Post Uploader.

This module defines the RESTful endpoints for:
- Uploading markdown posts (front matter normalization and renaming)
- Listing, downloading and deleting stored posts
- Health checks
"""

import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from ..config import Settings
from ..front_matter import has_front_matter, normalize
from ..models import APIResponse, UploadOptions
from ..observability import record_deletion, record_rejected_upload, record_upload
from ..storage import MARKDOWN_CONTENT_TYPE, InvalidFilenameError, PostNotFoundError, PostStorage, is_markdown_filename
from ..utils import current_date, format_filename
from .dependencies import get_settings, get_storage, require_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])

# Read uploads in 1 MiB chunks
_CHUNK_SIZE = 1024 * 1024


def parse_categories(raw: Optional[str]) -> List[str]:
    """Parse a comma separated category list, dropping blank entries."""
    if not raw:
        return []
    return [c.strip() for c in raw.split(",") if c.strip()]


async def _read_upload(upload: UploadFile, max_size: int) -> bytes:
    """Read an upload into memory, refusing anything larger than max_size."""
    chunks = []
    total = 0
    while True:
        chunk = await upload.read(_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            record_rejected_upload("too_large")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File too large")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/upload",
    response_model=APIResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_api_key)],
    summary="Upload a markdown post",
    description="Upload a markdown file. Front matter is completed and the file is stored under a dated slug name.",
)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="Markdown file"),
    layout: str = Form("", description="Jekyll layout (default: page)"),
    title: str = Form("", description="Post title (default: derived from the filename)"),
    date: str = Form("", description="Post date, YYYY-MM-DD (default: today)"),
    categories: str = Form("", description="Comma separated categories (default: blog)"),
    settings: Settings = Depends(get_settings),
    storage: PostStorage = Depends(get_storage),
) -> APIResponse:
    """Normalize and store an uploaded markdown post."""
    if file is None or not file.filename:
        record_rejected_upload("missing_file")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Error retrieving file")

    original_name = os.path.basename(file.filename)
    if not is_markdown_filename(original_name):
        record_rejected_upload("not_markdown")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only markdown files are allowed")

    content = await _read_upload(file, settings.max_upload_size)

    options = UploadOptions(
        layout=layout,
        title=title,
        date=date,
        categories=parse_categories(categories),
    )
    # one date for both the front matter and the filename
    today = current_date()
    processed = normalize(
        content,
        options,
        original_name,
        today=today,
        insert_inside_header=settings.insert_missing_inside_header,
    )
    filename = format_filename(original_name, options.title, options.date, today=today)

    try:
        info = storage.save(filename, processed, content_type=file.content_type or MARKDOWN_CONTENT_TYPE)
    except InvalidFilenameError as e:
        logger.warning(f"Refusing upload of {original_name!r}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid filename") from e
    except OSError as e:
        logger.error(f"Error saving {filename}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating file") from e

    record_upload(filename, info.size, has_front_matter(content))
    logger.info(f"Uploaded {original_name} as {filename}")
    return APIResponse(success=True, message="File uploaded successfully", data=info.model_dump(mode="json"))


@router.get(
    "/files",
    response_model=APIResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_api_key)],
    summary="List posts",
    description="List the markdown posts in the posts directory.",
)
async def list_files(storage: PostStorage = Depends(get_storage)) -> APIResponse:
    """List stored posts."""
    try:
        posts = storage.list_posts()
    except OSError as e:
        logger.error(f"Error reading posts directory: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error reading directory") from e

    return APIResponse(
        success=True,
        message="Files retrieved successfully",
        data=[p.model_dump(mode="json") for p in posts],
    )


@router.get(
    "/files/{filename}",
    dependencies=[Depends(require_api_key)],
    summary="Download a post",
    description="Return the raw content of a stored post.",
)
async def get_file(filename: str, storage: PostStorage = Depends(get_storage)) -> FileResponse:
    """Serve a stored post."""
    try:
        path = storage.get_path(filename)
    except (InvalidFilenameError, PostNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e
    return FileResponse(path, media_type=MARKDOWN_CONTENT_TYPE, filename=filename)


@router.delete(
    "/files/{filename}",
    response_model=APIResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_api_key)],
    summary="Delete a post",
    description="Delete a stored post.",
)
async def delete_file(filename: str, storage: PostStorage = Depends(get_storage)) -> APIResponse:
    """Delete a stored post."""
    try:
        storage.delete(filename)
    except (InvalidFilenameError, PostNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e
    except OSError as e:
        logger.error(f"Error deleting {filename}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting file") from e

    record_deletion(filename)
    return APIResponse(success=True, message="File deleted successfully")


@router.get(
    "/health",
    summary="Health check",
    description="Check if the API is healthy and the posts directory is writable.",
)
async def health_check(storage: PostStorage = Depends(get_storage)) -> dict:
    """Health check endpoint."""
    available = storage.is_available()
    return {
        "status": "healthy" if available else "unhealthy",
        "posts_dir": str(storage.posts_dir),
        "storage": available,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
