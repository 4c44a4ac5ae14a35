"""
Expiring key-value store for short-lived records (OTP codes, sessions)

The in-memory backend keeps records for a single process. The Redis backend
shares them across workers and survives restarts of any one of them.
"""

import json
import logging
import time
from threading import Lock
from typing import Callable, Optional, Protocol

import redis

from .config import OTP_STORE_BACKEND
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)


class ExpiringStore(Protocol):
    def get(self, key: str) -> Optional[dict]: ...

    def set(self, key: str, value: dict, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...

    def sweep(self) -> int: ...


class InMemoryExpiringStore:
    """Dict-backed store; expired entries are dropped on read and on sweep"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, tuple[dict, float]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[dict]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return dict(value)

    def set(self, key: str, value: dict, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (dict(value), self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
        if expired:
            logger.debug(f"🧹 Swept {len(expired)} expired records")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class RedisExpiringStore:
    """JSON values stored with SETEX; Redis handles expiry itself"""

    def __init__(self, client: redis.Redis, prefix: str = "kisandecks"):
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[dict]:
        raw = self.client.get(self._key(key))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.error(f"❌ Corrupt record at {self._key(key)}, discarding")
            self.client.delete(self._key(key))
            return None

    def set(self, key: str, value: dict, ttl_seconds: int) -> None:
        self.client.setex(self._key(key), max(1, int(ttl_seconds)), json.dumps(value))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))

    def sweep(self) -> int:
        return 0


_store: Optional[ExpiringStore] = None


def build_store() -> ExpiringStore:
    """Create the store selected by OTP_STORE_BACKEND"""
    if OTP_STORE_BACKEND == "redis":
        client = get_redis_client()
        if client is None:
            raise RuntimeError("OTP_STORE_BACKEND=redis requires REDIS_URL or REDIS_HOST")
        logger.info("✅ Using Redis expiring store for OTPs and sessions")
        return RedisExpiringStore(client)

    logger.info("✅ Using in-memory expiring store for OTPs and sessions (single process only)")
    return InMemoryExpiringStore()


def get_store() -> ExpiringStore:
    """FastAPI dependency returning the process-wide store"""
    global _store
    if _store is None:
        _store = build_store()
    return _store
