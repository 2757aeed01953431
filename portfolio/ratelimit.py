"""
Per-client sliding-window rate limiting for the public write endpoints.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most `max_requests` hits per key within `window_seconds`."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def _prune(self, key: str, now: float) -> Deque[float]:
        """Drop expired hits for `key`; the key itself goes once it is empty."""
        history = self._hits.get(key)
        if history is None:
            return deque()
        cutoff = now - self.window_seconds
        while history and history[0] <= cutoff:
            history.popleft()
        if not history:
            del self._hits[key]
        return history

    def _sweep(self, now: float) -> None:
        # At most once per window, so idle clients do not pile up.
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._hits):
            self._prune(key, now)

    def hit(self, key: str) -> bool:
        """Record a request for `key`; False when the limit is already reached."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            history = self._prune(key, now)
            if len(history) >= self.max_requests:
                return False
            history.append(now)
            self._hits[key] = history
            return True

    def retry_after(self, key: str) -> int:
        """Seconds until the oldest hit for `key` leaves the window."""
        now = self._clock()
        with self._lock:
            history = self._prune(key, now)
            if not history:
                return 0
            return max(1, math.ceil(history[0] + self.window_seconds - now))

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_key(request: Request, trusted_hops: int = 0) -> str:
    """
    Address of the caller as seen past `trusted_hops` reverse proxies.

    Each trusted proxy appends the peer it received from to X-Forwarded-For,
    so only the rightmost `trusted_hops` entries are trustworthy. Anything
    further left was supplied by the client and is ignored.
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_hops <= 0:
        return peer
    forwarded = request.headers.get("x-forwarded-for", "")
    chain = [part.strip() for part in forwarded.split(",") if part.strip()]
    chain.append(peer)
    return chain[max(0, len(chain) - 1 - trusted_hops)]


def rate_limit(name: str):
    """
    Build a dependency enforcing the limiter registered under `name` in
    `app.state.rate_limiters`.
    """

    def _dependency(request: Request) -> None:
        limiter: RateLimiter = request.app.state.rate_limiters[name]
        key = client_key(request, request.app.state.settings.trusted_proxy_hops)
        if not limiter.hit(key):
            logger.info("Rate limit '%s' exceeded for %s", name, key)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests",
                headers={"Retry-After": str(limiter.retry_after(key))},
            )

    return _dependency
