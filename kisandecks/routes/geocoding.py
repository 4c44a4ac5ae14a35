"""Location search proxy.

Proxies OpenStreetMap Nominatim restricted to India so the browser avoids CORS
and upstream usage stays within Nominatim's policy (valid User-Agent, modest
rate). Results are cached in Redis when it is configured.
"""

import json
import logging
from typing import Optional

import httpx
import redis
from fastapi import APIRouter, Depends

from ..config import (
    LOCATION_SEARCH_CACHE_SECONDS,
    LOCATION_SEARCH_RPM,
    NOMINATIM_BASE_URL,
    NOMINATIM_USER_AGENT,
)
from ..errors import UpstreamError
from ..rate_limiter import create_rate_limiter, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["Geocoding"])

rate_limit_search = create_rate_limiter(
    limit=LOCATION_SEARCH_RPM,
    window_seconds=60,
    key_prefix="location_search",
)

MIN_QUERY_LENGTH = 2
RESULT_LIMIT = 8


def _cache_get(key: str) -> Optional[list]:
    try:
        client = get_redis_client()
        cached = client.get(key) if client else None
    except redis.RedisError as e:
        logger.warning(f"⚠️ Location cache read failed: {str(e)}")
        return None
    return json.loads(cached) if cached else None


def _cache_set(key: str, results: list) -> None:
    try:
        client = get_redis_client()
        if client:
            client.setex(key, LOCATION_SEARCH_CACHE_SECONDS, json.dumps(results))
    except redis.RedisError as e:
        logger.warning(f"⚠️ Location cache write failed: {str(e)}")


@router.get("/search")
async def search_locations(q: Optional[str] = None, _: None = Depends(rate_limit_search)):
    """Nominatim search results (raw objects) for Indian places"""
    query = (q or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    cache_key = f"geo:search:in:{query.lower()}"
    cached = _cache_get(cache_key)
    if cached is not None:
        return cached

    params = {
        "q": query,
        "format": "json",
        "countrycodes": "in",
        "limit": str(RESULT_LIMIT),
        "addressdetails": 1,
    }
    headers = {"User-Agent": NOMINATIM_USER_AGENT, "Accept": "application/json"}

    try:
        async with httpx.AsyncClient(timeout=8.0) as client:
            resp = await client.get(f"{NOMINATIM_BASE_URL.rstrip('/')}/search", params=params, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"❌ Nominatim request failed: {str(e)}")
        raise UpstreamError("Failed to search locations", "स्थान खोज विफल रही") from e

    if resp.status_code >= 400:
        logger.warning(f"Nominatim error {resp.status_code}: {resp.text[:200]}")
        raise UpstreamError("Failed to search locations", "स्थान खोज विफल रही")

    results = resp.json()
    _cache_set(cache_key, results)
    return results
