"""Request and upload metrics for the Post Uploader.

This module provides in-process counters and histograms for monitoring
uploads, deletions and HTTP traffic.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

logger = logging.getLogger(__name__)


class MetricsRegistry:
    """Simple metrics registry for tracking counters, histograms and gauges."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: Dict[str, Dict[str, int]] = {}
        self._histograms: Dict[str, Dict[str, Dict[str, float]]] = {}
        self._gauges: Dict[str, Dict[str, float]] = {}

    def counter(self, name: str, labels: Optional[Dict[str, str]] = None, value: int = 1) -> None:
        """Increment a counter metric."""
        label_key = self._label_key(labels)
        with self._lock:
            series = self._counters.setdefault(name, {})
            series[label_key] = series.get(label_key, 0) + value

    def histogram(self, name: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Record a histogram observation."""
        label_key = self._label_key(labels)
        with self._lock:
            summary = self._histograms.setdefault(name, {}).setdefault(label_key, {"count": 0, "sum": 0.0})
            summary["count"] += 1
            summary["sum"] += value

    def gauge(self, name: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Set a gauge metric value."""
        label_key = self._label_key(labels)
        with self._lock:
            self._gauges.setdefault(name, {})[label_key] = value

    def _label_key(self, labels: Optional[Dict[str, str]]) -> str:
        """Create a string key from labels dict."""
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def get_counter(self, name: str, labels: Optional[Dict[str, str]] = None) -> int:
        """Get current counter value."""
        return self._counters.get(name, {}).get(self._label_key(labels), 0)

    def get_histogram_stats(self, name: str, labels: Optional[Dict[str, str]] = None) -> Dict[str, float]:
        """Get histogram statistics (count, sum, avg)."""
        with self._lock:
            summary = self._histograms.get(name, {}).get(self._label_key(labels))
            return self._stats(summary)

    def get_gauge(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Get current gauge value."""
        return self._gauges.get(name, {}).get(self._label_key(labels), 0)

    @staticmethod
    def _stats(summary: Optional[Dict[str, float]]) -> Dict[str, float]:
        if not summary or not summary["count"]:
            return {"count": 0, "sum": 0, "avg": 0}
        return {"count": summary["count"], "sum": summary["sum"], "avg": summary["sum"] / summary["count"]}

    def get_all_metrics(self) -> Dict[str, Dict]:
        """Get all metrics for export."""
        with self._lock:
            return {
                "counters": {name: dict(series) for name, series in self._counters.items()},
                "histograms": {
                    name: {k: self._stats(v) for k, v in series.items()} for name, series in self._histograms.items()
                },
                "gauges": {name: dict(series) for name, series in self._gauges.items()},
            }

    def reset(self) -> None:
        """Drop all recorded metrics."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
            self._gauges.clear()


# Global metrics registry
_registry = MetricsRegistry()


def get_metrics_registry() -> MetricsRegistry:
    """Get the global metrics registry."""
    return _registry


def record_upload(filename: str, size: int, had_front_matter: bool) -> None:
    """Record a stored upload."""
    _registry.counter("post_uploader_uploads_total", {"front_matter": "existing" if had_front_matter else "generated"})
    _registry.histogram("post_uploader_upload_bytes", float(size))
    logger.debug(f"Recorded upload: {filename} ({size} bytes)")


def record_rejected_upload(reason: str) -> None:
    """Record an upload refused before normalization."""
    _registry.counter("post_uploader_uploads_rejected_total", {"reason": reason})


def record_deletion(filename: str) -> None:
    """Record a deleted post."""
    _registry.counter("post_uploader_deletions_total")
    logger.debug(f"Recorded deletion: {filename}")


def route_template(request: Request) -> str:
    """Path template of the route serving a request, or "unmatched"."""
    partial = None
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", "unmatched")
        if match == Match.PARTIAL and partial is None:
            partial = getattr(route, "path", None)
    return partial or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for recording HTTP request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process the request and record metrics."""
        start_time = time.time()
        path = route_template(request)

        response = await call_next(request)

        duration = time.time() - start_time
        labels = {
            "method": request.method,
            "path": path,
            "status": str(response.status_code),
        }

        _registry.counter("post_uploader_http_requests_total", labels)
        _registry.histogram("post_uploader_http_request_duration_seconds", duration, labels)

        return response
