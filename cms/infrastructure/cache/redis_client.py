# cms/infrastructure/cache/redis_client.py

import redis.asyncio as redis

from cms.config.settings import settings


class RedisClient:
    def __init__(self):
        self.client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
        )

    async def push(self, key: str, value: str, ttl: int) -> None:
        """Append value to the list at key and (re)set its TTL."""
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.rpush(key, value)
            pipe.expire(key, ttl)
            await pipe.execute()

    async def pop_all(self, key: str) -> list[str]:
        """Return the whole list at key and delete it atomically."""
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.lrange(key, 0, -1)
            pipe.delete(key)
            values, _ = await pipe.execute()
        return values

    async def delete_key(self, key: str) -> None:
        """Delete a key."""
        await self.client.delete(key)

    async def close(self) -> None:
        await self.client.aclose()
