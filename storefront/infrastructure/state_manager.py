import json
import logging
import time
from typing import Any, Dict, List, Optional

import redis
from cachetools import TTLCache
from redis.exceptions import RedisError

from storefront.core.config import settings

logger = logging.getLogger(__name__)


class StateManager:
    """
    Per-session storage for the shopper's cart so it survives across page
    views. Redis when reachable, process memory otherwise.
    """

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl: Optional[int] = None,
        maxsize: Optional[int] = None,
        timer=time.monotonic,
    ):
        self.redis = None
        self.redis_available = False

        # 1. Primary Memory (Redis)
        if redis_url:
            try:
                self.redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_connect_timeout=1  # Fail fast if Redis is down
                )
                self.redis.ping()
                self.redis_available = True
                logger.info("✅ StateManager: Connected to Redis.")
            except Exception as e:
                # Unreachable server or a malformed URL
                logger.warning(f"⚠️ StateManager: Redis unavailable ({e}). Using RAM fallback.")
        else:
            logger.info("StateManager: no REDIS_URL, keeping sessions in RAM.")

        # 2. Fallback Memory (RAM), expiring on the same clock as the Redis keys
        self.ttl = ttl or settings.SESSION_TTL_SECONDS
        self._memory_store: TTLCache = TTLCache(
            maxsize=maxsize or settings.SESSION_CACHE_SIZE,
            ttl=self.ttl,
            timer=timer,
        )

    def get_cart(self, session_id: str) -> List[Dict[str, Any]]:
        """Cart lines for the session, oldest first. Empty list if none."""
        key = f"session:{session_id}:cart"

        if self.redis_available:
            try:
                data = self.redis.get(key)
                # An expired Redis key means an expired cart
                return json.loads(data) if data else []
            except RedisError as e:
                self._handle_redis_error(e)

        return list(self._memory_store.get(key, []))

    def save_cart(self, session_id: str, lines: List[Dict[str, Any]]):
        key = f"session:{session_id}:cart"

        if self.redis_available:
            try:
                self.redis.setex(key, self.ttl, json.dumps(lines))
            except RedisError as e:
                self._handle_redis_error(e)

        # Always write to RAM so a Redis outage doesn't lose the cart
        self._memory_store[key] = list(lines)

    def clear_cart(self, session_id: str):
        key = f"session:{session_id}:cart"

        if self.redis_available:
            try:
                self.redis.delete(key)
            except RedisError as e:
                self._handle_redis_error(e)

        self._memory_store.pop(key, None)

    def _handle_redis_error(self, e):
        """Log error and switch flag to False to stop trying Redis for a while."""
        logger.error(f"❌ Redis Error: {e}. Switching to RAM mode.")
        self.redis_available = False
