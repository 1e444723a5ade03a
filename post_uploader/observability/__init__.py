"""Observability layer for the Post Uploader.

This module provides in-process metrics and the HTTP metrics middleware.
"""

from .metrics import (
    MetricsMiddleware,
    MetricsRegistry,
    get_metrics_registry,
    record_deletion,
    record_rejected_upload,
    record_upload,
)

__all__ = [
    "MetricsMiddleware",
    "MetricsRegistry",
    "get_metrics_registry",
    "record_upload",
    "record_rejected_upload",
    "record_deletion",
]
