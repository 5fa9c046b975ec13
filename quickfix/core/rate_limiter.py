# core/rate_limiter.py
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import Depends, HTTPException, status

from quickfix.app.config import settings
from quickfix.api.deps import get_current_user
from quickfix.models.user import User

logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None


def get_redis() -> Optional[redis.Redis]:
    """Shared client, or None when REDIS_URL is not configured."""
    global _client
    if _client is None and settings.REDIS_URL:
        _client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _client


def _key(key_prefix: str, identifier: str) -> str:
    return f"rate_limit:{key_prefix}:{identifier}"


def rate_limit(key_prefix: str, max_calls: int, period: int):
    """
    Per-user rate-limit dependency using Redis counters.

    Args:
        key_prefix: unique key namespace
        max_calls: allowed calls
        period: window in seconds
    """

    async def dependency(current_user: User = Depends(get_current_user)) -> None:
        r = get_redis()
        if r is None:
            # Skip rate limiting if Redis is not available
            return

        key = _key(key_prefix, str(current_user.id))
        try:
            current = await r.incr(key)
            if current == 1:
                await r.expire(key, period)
            if current <= max_calls:
                return
            ttl = await r.ttl(key)
        except RedisError as exc:
            logger.warning(f"Rate limiter unavailable for {key}: {exc}")
            return

        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded. Retry after {ttl}s",
            headers={"Retry-After": str(max(ttl, 0))},
        )

    return dependency
