# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Flask, current_app, request

from chat_backend.shared.config import SecurityConfig
from chat_backend.shared.errors import RateLimitedError
from chat_backend.shared.logging import logger
from chat_backend.shared.middleware.request_logger import client_ip

EXTENSION_KEY = "rate_limits"


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._buckets: dict[str, Bucket] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep > self._window:
                self._sweep(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = Bucket(deque(maxlen=self._limit))
            self._drop_expired(bucket, now)
            if len(bucket.timestamps) >= self._limit:
                return False
            bucket.timestamps.append(now)
            return True

    def _drop_expired(self, bucket: Bucket, now: float) -> None:
        while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
            bucket.timestamps.popleft()

    def _sweep(self, now: float) -> None:
        # Idle clients would otherwise keep their key forever.
        for key in list(self._buckets):
            bucket = self._buckets[key]
            self._drop_expired(bucket, now)
            if not bucket.timestamps:
                del self._buckets[key]
        self._last_sweep = now


class RateLimitRegistry:
    """Per-app limiter state, one limiter per decorated view."""

    def __init__(
        self,
        security: SecurityConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.enabled = security.enable_rate_limit
        self._default_limit = security.rate_limit_requests
        self._default_window = security.rate_limit_window
        self._clock = clock
        self._lock = Lock()
        self._limiters: dict[str, InMemoryRateLimiter] = {}

    def limiter(
        self, name: str, limit: int | None, window_seconds: float | None
    ) -> InMemoryRateLimiter:
        with self._lock:
            limiter = self._limiters.get(name)
            if limiter is None:
                limiter = self._limiters[name] = InMemoryRateLimiter(
                    limit or self._default_limit,
                    window_seconds or self._default_window,
                    clock=self._clock,
                )
            return limiter


def configure_rate_limiting(
    app: Flask,
    security: SecurityConfig,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> RateLimitRegistry:
    registry = RateLimitRegistry(security, clock=clock)
    app.extensions[EXTENSION_KEY] = registry
    logger.info(f"rate_limit: enabled={registry.enabled}")
    return registry


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Limit calls per client IP and path.

    Settings and counters come from the registry installed on the current app
    by ``configure_rate_limiting``; apps without one are not limited.
    """

    def decorator(f: Callable):
        name = f.__qualname__

        @wraps(f)
        def wrapper(*args, **kwargs):
            registry: RateLimitRegistry | None = current_app.extensions.get(EXTENSION_KEY)
            if registry is None or not registry.enabled:
                return f(*args, **kwargs)
            limiter = registry.limiter(name, limit, window_seconds)
            key = f"{request.path}:{client_ip()}"
            if not limiter.allow(key):
                logger.warning(f"rate_limit: rejected {request.method} {request.path}")
                raise RateLimitedError()
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "InMemoryRateLimiter",
    "RateLimitRegistry",
    "configure_rate_limiting",
    "rate_limit",
]
