"""
Session store: opaque cookie value -> JWT, with a TTL.

Redis in deployment; `memory://` selects an in-process TTL cache for local
runs and tests.
"""

from __future__ import annotations

import secrets
import threading
import time
from collections.abc import Callable
from typing import Protocol

import redis
from cachetools import TLRUCache

from ..observability.logging import get_logger
from ..settings import Settings

log = get_logger("session_store")

_KEY_PREFIX = "session:"


def new_session_key() -> str:
    # 64 random bytes, URL-safe base64.
    return secrets.token_urlsafe(64)


class SessionStore(Protocol):
    def set(self, key: str, token: str, *, ttl_seconds: int) -> None: ...

    def get(self, key: str) -> str | None: ...

    def delete(self, key: str) -> None: ...


class RedisSessionStore:
    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSessionStore":
        return cls(redis.from_url(url, decode_responses=True))

    def set(self, key: str, token: str, *, ttl_seconds: int) -> None:
        self.client.set(_KEY_PREFIX + key, token, ex=int(ttl_seconds))

    def get(self, key: str) -> str | None:
        v = self.client.get(_KEY_PREFIX + key)
        return str(v) if v is not None else None

    def delete(self, key: str) -> None:
        self.client.delete(_KEY_PREFIX + key)


class MemorySessionStore:
    """Single-process store; each entry expires after the TTL given to `set`."""

    def __init__(self, *, maxsize: int = 10_000, timer: Callable[[], float] = time.monotonic):
        # Values are (token, ttl_seconds); the ttl decides when the entry expires.
        self._cache: TLRUCache[str, tuple[str, int]] = TLRUCache(
            maxsize=maxsize,
            ttu=lambda _key, value, now: now + value[1],
            timer=timer,
        )
        self._lock = threading.Lock()

    def set(self, key: str, token: str, *, ttl_seconds: int) -> None:
        with self._lock:
            self._cache[key] = (token, int(ttl_seconds))

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._cache.get(key)
        return entry[0] if entry else None

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)


def build_session_store(settings: Settings) -> SessionStore:
    url = str(settings.redis_url or "").strip()
    if not url or url.startswith("memory://"):
        log.info("session_store_configured", backend="memory")
        return MemorySessionStore()
    log.info("session_store_configured", backend="redis")
    return RedisSessionStore.from_url(url)
