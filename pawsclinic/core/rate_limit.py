"""
In-memory per-IP rate limiting for the public API.
Counts reset on restart and are not shared between processes.
"""
import time
from threading import Lock
from typing import Dict, List, Tuple

from fastapi import Request

from pawsclinic.core.errors import RateLimitError, error_response, log_error
from pawsclinic.core.logging import get_logger

logger = get_logger(__name__)

CLEANUP_INTERVAL_SECONDS = 60.0  # sweep keys that have gone quiet


class SlidingWindowLimiter:
    """Allow at most ``max_requests`` hits per key within ``window_seconds``."""

    def __init__(self, max_requests: int, window_seconds: float = 60.0,
                 cleanup_interval: float = CLEANUP_INTERVAL_SECONDS):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._hits: Dict[str, List[float]] = {}
        self._lock = Lock()
        self._last_cleanup: float | None = None

    def __len__(self) -> int:
        return len(self._hits)

    def hit(self, key: str, now: float | None = None) -> Tuple[bool, int]:
        """
        Record a request for ``key``.
        Returns: (allowed, remaining)
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            self._cleanup_expired(now)
            recent = [t for t in self._hits.get(key, []) if now - t < self.window_seconds]
            if len(recent) >= self.max_requests:
                self._hits[key] = recent
                return False, 0
            recent.append(now)
            self._hits[key] = recent
            return True, self.max_requests - len(recent)

    def _cleanup_expired(self, now: float):
        """Drop keys with no hit inside the window. Caller holds the lock."""
        if self._last_cleanup is None:
            self._last_cleanup = now
            return
        if now - self._last_cleanup < self.cleanup_interval:
            return

        expired = [k for k, hits in self._hits.items()
                   if not hits or now - hits[-1] >= self.window_seconds]
        for k in expired:
            del self._hits[k]
        self._last_cleanup = now

        if expired:
            logger.debug("rate_limit_keys_evicted", count=len(expired), tracked=len(self._hits))

    def reset(self):
        with self._lock:
            self._hits.clear()
            self._last_cleanup = None


class RateLimitMiddleware:
    """Apply a SlidingWindowLimiter to every request under ``prefix``."""

    def __init__(self, limiter: SlidingWindowLimiter, prefix: str = "/api/"):
        self.limiter = limiter
        self.prefix = prefix

    async def __call__(self, request: Request, call_next):
        if not request.url.path.startswith(self.prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        allowed, remaining = self.limiter.hit(client_ip)
        if not allowed:
            exc = RateLimitError()
            log_error(exc, {"endpoint": request.url.path, "client_ip": client_ip})
            return error_response(exc.status_code, exc.message)

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
