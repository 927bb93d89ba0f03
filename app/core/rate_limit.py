"""Per-client fixed-window rate limiting with a bounded FIFO queue.

Each client key gets `permit_limit` admissions per window. Requests past the
limit wait in arrival order for the next window, up to `queue_limit` of them;
anything beyond that is rejected immediately.
"""
import asyncio
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from fastapi import Depends, Request

from app.core.config import settings
from app.core.exceptions import RateLimitExceeded
from app.core.metrics import rate_limit_exceeded, rate_limit_queued

logger = logging.getLogger(__name__)

_PRUNE_THRESHOLD = 1024


@dataclass
class _Window:
    started_at: float
    used: int = 0
    waiters: Deque[asyncio.Future] = field(default_factory=deque)
    timer: Optional[asyncio.TimerHandle] = None


class FixedWindowRateLimiter:

    def __init__(self, permit_limit: int, window_seconds: float, queue_limit: int):
        if permit_limit < 1:
            raise ValueError("permit_limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        if queue_limit < 0:
            raise ValueError("queue_limit must not be negative")
        self.permit_limit = permit_limit
        self.window_seconds = window_seconds
        self.queue_limit = queue_limit
        self._windows: Dict[str, _Window] = {}

    async def acquire(self, key: str) -> bool:
        """Wait for a permit for `key`.

        Returns True when the caller had to queue. Raises RateLimitExceeded
        when the window and the queue are both full.
        """
        loop = asyncio.get_running_loop()
        window = self._current_window(key, loop)

        if window.used < self.permit_limit and not window.waiters:
            window.used += 1
            return False

        if len(window.waiters) >= self.queue_limit:
            raise RateLimitExceeded(retry_after=self._retry_after(window, loop))

        waiter = loop.create_future()
        window.waiters.append(waiter)
        if window.timer is None:
            delay = max(window.started_at + self.window_seconds - loop.time(), 0.0)
            window.timer = loop.call_later(delay, self._replenish, key)

        try:
            await waiter
        except asyncio.CancelledError:
            if waiter in window.waiters:
                window.waiters.remove(waiter)
            raise
        return True

    def reset(self) -> None:
        for window in self._windows.values():
            if window.timer is not None:
                window.timer.cancel()
            for waiter in window.waiters:
                waiter.cancel()
        self._windows.clear()

    def _current_window(self, key: str, loop: asyncio.AbstractEventLoop) -> _Window:
        now = loop.time()
        window = self._windows.get(key)
        if window is None:
            if len(self._windows) >= _PRUNE_THRESHOLD:
                self._prune(now)
            window = _Window(started_at=now)
            self._windows[key] = window
        elif now >= window.started_at + self.window_seconds:
            if window.waiters:
                # Timer is late; hand the new window to the queue first.
                if window.timer is not None:
                    window.timer.cancel()
                    window.timer = None
                self._replenish(key)
            else:
                if window.timer is not None:
                    window.timer.cancel()
                    window.timer = None
                window.started_at = now
                window.used = 0
        return window

    def _replenish(self, key: str) -> None:
        window = self._windows.get(key)
        if window is None:
            return
        loop = asyncio.get_running_loop()
        window.timer = None
        window.started_at = loop.time()
        window.used = 0

        while window.waiters and window.used < self.permit_limit:
            waiter = window.waiters.popleft()
            if waiter.done():
                continue
            waiter.set_result(None)
            window.used += 1

        if window.waiters:
            window.timer = loop.call_later(self.window_seconds, self._replenish, key)

    def _retry_after(self, window: _Window, loop: asyncio.AbstractEventLoop) -> int:
        remaining = window.started_at + self.window_seconds - loop.time()
        # Queued requests take the next windows before this caller could.
        backlog = len(window.waiters) // self.permit_limit
        return max(1, math.ceil(remaining + backlog * self.window_seconds))

    def _prune(self, now: float) -> None:
        idle = [
            key for key, window in self._windows.items()
            if not window.waiters and now >= window.started_at + self.window_seconds
        ]
        for key in idle:
            del self._windows[key]


rate_limiter = FixedWindowRateLimiter(
    permit_limit=settings.RATE_LIMIT,
    window_seconds=settings.RATE_LIMIT_WINDOW,
    queue_limit=settings.RATE_LIMIT_QUEUE_LIMIT,
)


def get_rate_limiter() -> FixedWindowRateLimiter:
    return rate_limiter


def get_client_ip(request: Request) -> str:
    if settings.TRUST_FORWARDED_FOR:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First IP in the chain is the original client
            return forwarded_for.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "unknown"


async def check_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    client_ip = get_client_ip(request)
    endpoint = request.url.path
    try:
        queued = await limiter.acquire(client_ip)
    except RateLimitExceeded:
        rate_limit_exceeded.labels(endpoint=endpoint).inc()
        logger.warning(f"Rate limit exceeded for {client_ip} on {endpoint}")
        raise
    if queued:
        rate_limit_queued.labels(endpoint=endpoint).inc()
