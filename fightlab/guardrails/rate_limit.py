import math
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from fastapi import HTTPException
from starlette.requests import Request


class SimpleRateLimiter:
    """Sliding-window limiter keyed by client IP; in-memory (per process). Guards POST /analyze, the only endpoint that spends model tokens."""

    def __init__(self, max_requests: int, window_seconds: int, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)

    def retry_after(self, key: str) -> Optional[int]:
        """Seconds until the oldest hit for key leaves the window, or None if key is under its limit."""
        now = self._clock()
        hits = self._hits[key]
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()
        if not hits:
            # Drop idle keys so the map does not grow with one entry per IP ever seen.
            del self._hits[key]
            return None
        if len(hits) < self.max_requests:
            return None
        return max(1, math.ceil(self.window_seconds - (now - hits[0])))

    def check(self, request: Request) -> None:
        """Raise 429 with Retry-After if the client is over its limit; otherwise record the request."""
        ip = request.client.host if request.client else "unknown"
        wait = self.retry_after(ip)
        if wait is not None:
            raise HTTPException(
                status_code=429,
                detail={"error": "Rate limit exceeded", "message": "Too many analyses submitted. Please retry later."},
                headers={"Retry-After": str(wait)},
            )
        self._hits[ip].append(self._clock())
