"""
HireLane API: Fixed-Window Rate Limit Store
=============================================

What:  In-process counter store used by the request middleware wrapper to
       enforce per-(client address, URL) request budgets.
How:   One entry per key holding a request count and the instant the current
       window ends. A background task sweeps expired entries on a fixed
       interval so memory stays bounded without relying on request traffic.
Who:   Owned by the application (`rate_limiter` singleton, swept from the
       lifespan handler) and passed to the wrapper through its options.

Algorithm: Fixed Window Counter
    1. First request for a key opens a window: count=1, reset_at=now+window
    2. Requests inside the window increment count while count < limit
    3. A request arriving with count == limit is rejected; retry_after is the
       number of whole seconds until reset_at
    4. The first request at or after reset_at replaces the entry (count=1)

Concurrency:
    `hit()` performs lookup, comparison and increment under one
    threading.Lock. The critical section is O(1) and never awaits, so it is
    atomic for coroutines on the event loop and for sync handlers running in
    the threadpool alike. N simultaneous hits on one key therefore never
    admit more than `limit` requests per window.

Multi-process deployments:
    Each worker keeps its own counters. A shared counter service (fixed-window
    increment-with-expiry) can stand in for this class by implementing the
    `RateLimitStore` protocol below.
"""

import asyncio
import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Live window for one key."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """
    Outcome of a single `hit()`.

    retry_after is only meaningful when the request was rejected; it is
    always at least 1 in that case.
    """

    allowed: bool
    remaining: int
    retry_after: int = 0


class RateLimitStore(Protocol):
    def hit(self, key: str, limit: int, window_ms: int) -> RateLimitDecision: ...

    def sweep(self) -> int: ...


class FixedWindowRateLimiter:
    """
    In-memory fixed-window rate limiter.

    Args:
        clock: Monotonic time source in seconds. Tests inject a fake clock to
               step across window boundaries without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._entries)

    def hit(self, key: str, limit: int, window_ms: int) -> RateLimitDecision:
        """
        Count one request against `key` and decide whether it may proceed.

        Raises:
            ValueError: limit or window_ms is not positive
        """
        if limit < 1 or window_ms < 1:
            raise ValueError("Rate limit requires limit >= 1 and window_ms >= 1")

        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now >= entry.reset_at:
                self._entries[key] = RateLimitEntry(count=1, reset_at=now + window_ms / 1000)
                return RateLimitDecision(allowed=True, remaining=limit - 1)

            if entry.count >= limit:
                retry_after = max(1, math.ceil(entry.reset_at - now))
                return RateLimitDecision(allowed=False, remaining=0, retry_after=retry_after)

            entry.count += 1
            return RateLimitDecision(allowed=True, remaining=limit - entry.count)

    def sweep(self) -> int:
        """Delete every entry whose window has ended. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.reset_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate-limit windows", len(expired))
        return len(expired)

    def reset(self) -> None:
        """Forget every window."""
        with self._lock:
            self._entries.clear()

    # ── Background sweep ──────────────────────────────────────────────────

    def start_sweeper(self, interval: float = 60.0) -> asyncio.Task:
        """
        Start the periodic sweep on the running event loop.

        Idempotent: a second call while the task is alive returns the same task.
        Must be called from inside a running loop (the app lifespan).
        """
        if self._sweeper is not None and not self._sweeper.done():
            return self._sweeper
        loop = asyncio.get_running_loop()
        self._sweeper = loop.create_task(self._sweep_forever(interval), name="rate-limit-sweeper")
        logger.info("Rate-limit sweeper started (interval=%ss)", interval)
        return self._sweeper

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                self.sweep()
            except Exception:
                logger.error("Rate-limit sweep failed", exc_info=True)


# Process-wide store shared by every wrapped handler; swept from the lifespan
rate_limiter = FixedWindowRateLimiter()
