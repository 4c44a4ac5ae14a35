"""
Per-client rate limiting for OTP sends and location search.

Counters live in process memory and are pushed to Redis every few seconds when
Redis is configured, so several workers converge on one count per window.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import Request

from .config import (
    REDIS_DB,
    REDIS_HOST,
    REDIS_PASSWORD,
    REDIS_PORT,
    REDIS_SSL,
    REDIS_URL,
    TRUSTED_PROXY_IPS,
)
from .errors import RateLimited

logger = logging.getLogger(__name__)

REDIS_SYNC_INTERVAL = 10
CLEANUP_INTERVAL = 60

_CONNECTION_OPTIONS = {
    "decode_responses": True,
    "socket_connect_timeout": 15,
    "socket_timeout": 30,
    "retry_on_timeout": True,
    "health_check_interval": 30,
    "max_connections": 20,
}

redis_client: Optional[redis.Redis] = None

# key -> {"count", "reset_at", "synced_at"}
_windows: dict[str, dict] = {}
_windows_lock = Lock()
_last_cleanup = 0


def redis_configured() -> bool:
    return bool(REDIS_URL or REDIS_HOST)


def _mask_url(url: str) -> str:
    if "@" not in url:
        return "****"
    scheme = url.split(":", 1)[0]
    return f"{scheme}:****@{url.rsplit('@', 1)[1]}"


def _connect() -> redis.Redis:
    if REDIS_URL:
        logger.info(f"📡 Connecting to Redis at {_mask_url(REDIS_URL)}")
        client = redis.from_url(REDIS_URL, **_CONNECTION_OPTIONS)
    else:
        logger.info(f"📡 Connecting to Redis at {REDIS_HOST}:{REDIS_PORT} db={REDIS_DB} ssl={REDIS_SSL}")
        client = redis.Redis(
            host=REDIS_HOST,
            port=REDIS_PORT,
            password=REDIS_PASSWORD,
            db=REDIS_DB,
            ssl=REDIS_SSL,
            **_CONNECTION_OPTIONS,
        )
    client.ping()
    logger.info("✅ Redis connected")
    return client


def get_redis_client() -> Optional[redis.Redis]:
    """
    Shared Redis client, created on first use.

    Returns None when neither REDIS_URL nor REDIS_HOST is set.

    Raises:
        redis.RedisError: If Redis is configured but unreachable
    """
    global redis_client
    if redis_client is None and redis_configured():
        try:
            redis_client = _connect()
        except redis.RedisError as e:
            logger.error(f"❌ Failed to connect to Redis: {str(e)}")
            raise
    return redis_client


def reset_rate_limits():
    """Forget all in-memory counters"""
    with _windows_lock:
        _windows.clear()


def _drop_expired(now: int) -> None:
    global _last_cleanup
    if now - _last_cleanup < CLEANUP_INTERVAL:
        return
    expired = [key for key, window in _windows.items() if now >= window["reset_at"]]
    for key in expired:
        del _windows[key]
    if expired:
        logger.debug(f"🧹 Dropped {len(expired)} expired rate limit windows")
    _last_cleanup = now


def _open_window(key: str, window_seconds: int, now: int, client: Optional[redis.Redis]) -> dict:
    window = {"count": 0, "reset_at": now + window_seconds, "synced_at": now}
    if client is None:
        return window
    # Another worker may already have counted requests in this window
    try:
        stored, ttl = client.get(key), client.ttl(key)
    except redis.RedisError as e:
        logger.warning(f"⚠️ Could not read rate limit from Redis, counting locally: {e}")
        return window
    if stored and ttl > 0:
        window["count"] = int(stored)
        window["reset_at"] = now + ttl
    return window


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """
    Count one request against a fixed window.

    Returns:
        Tuple of (is_allowed, count, seconds_until_reset)
    """
    now = int(time.time())

    with _windows_lock:
        _drop_expired(now)
        window = _windows.get(key)
        if window is None:
            window = _windows[key] = _open_window(key, window_seconds, now, client)
        elif now >= window["reset_at"]:
            window.update(count=0, reset_at=now + window_seconds, synced_at=0)

        allowed = window["count"] < limit
        if allowed:
            window["count"] += 1

        if client is not None and now - window["synced_at"] >= REDIS_SYNC_INTERVAL:
            try:
                client.set(key, window["count"], ex=window_seconds)
                window["synced_at"] = now
            except redis.RedisError as e:
                logger.warning(f"⚠️ Could not sync rate limit to Redis: {e}")

        return allowed, window["count"], max(0, window["reset_at"] - now)


def client_ip(request: Request) -> str:
    """Peer address, or the first X-Forwarded-For hop when the peer is a trusted proxy"""
    peer = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and peer in TRUSTED_PROXY_IPS:
        return forwarded.split(",")[0].strip() or peer
    return peer


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str):
    """
    Build a per-IP rate limit dependency.

    Example:
        rate_limit_otp_send = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="otp_send")

        @router.post("/farmer/login/send-otp")
        async def send_login_otp(data: SendOtpRequest, _: None = Depends(rate_limit_otp_send)):
            ...
    """

    async def rate_limiter(request: Request) -> None:
        try:
            client = get_redis_client()
        except redis.RedisError:
            client = None

        key = f"{key_prefix}:{client_ip(request)}"
        allowed, count, retry_after = check_rate_limit(key, limit, window_seconds, client)
        if not allowed:
            logger.warning(f"🚫 Rate limit exceeded for {key} ({count}/{limit})")
            raise RateLimited(retry_after)

    return rate_limiter
