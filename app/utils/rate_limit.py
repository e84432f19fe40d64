"""
Optional per-client rate limiting for chat sends.

Uses Redis when CHAT_RATE_LIMIT_PER_MINUTE is set.
If not set or Redis unavailable, no limit is applied.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


async def check_chat_rate_limit(
    client_key: str,
    redis_client: Optional[Any],
    limit_per_minute: Optional[int],
) -> bool:
    """
    Check if client_key is within its per-minute budget.
    Returns True if allowed, False if rate limited.
    If redis_client or limit_per_minute is None, always returns True.
    """
    if redis_client is None or limit_per_minute is None or limit_per_minute <= 0:
        return True
    key = f"shopdesk:ratelimit:chat:{client_key}"
    try:
        pipe = redis_client.pipeline()
        pipe.incr(key)
        pipe.expire(key, 60)
        results = await pipe.execute()
        count = results[0] if results else 0
        return count <= limit_per_minute
    except Exception as e:
        logger.warning("Rate limit check failed, allowing request: %s", e)
        return True
