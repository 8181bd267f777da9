"""Redis-backed flash bag. One list of pending messages per user, replayed on the next page view."""

import json
from typing import Dict, List

from cms.infrastructure.cache.redis_client import RedisClient

FLASH_PREFIX = "flash:"


class RedisFlashBag:
    """Implements FlashBag protocol for a single user."""

    def __init__(self, redis_client: RedisClient, user_id: int, ttl: int = 3600) -> None:
        self._redis = redis_client
        self._key = f"{FLASH_PREFIX}{user_id}"
        self._ttl = ttl

    async def _add(self, kind: str, message: str) -> None:
        await self._redis.push(self._key, json.dumps({"type": kind, "message": message}), ttl=self._ttl)

    async def success(self, message: str) -> None:
        await self._add("success", message)

    async def error(self, message: str) -> None:
        await self._add("error", message)

    async def warning(self, message: str) -> None:
        await self._add("warning", message)

    async def clear(self) -> None:
        await self._redis.delete_key(self._key)

    async def pop_all(self) -> List[Dict[str, str]]:
        return [json.loads(raw) for raw in await self._redis.pop_all(self._key)]
