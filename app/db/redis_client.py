import redis.asyncio as redis
from app.config import settings
from typing import Dict, List, Optional


class RedisClient:
    def __init__(self):
        self.redis: Optional[redis.Redis] = None

    async def connect(self):
        self.redis = redis.from_url(
            settings.redis_url,
            password=settings.redis_token,
            encoding="utf-8",
            decode_responses=True
        )

    async def close(self):
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    def pipeline(self):
        return self.redis.pipeline(transaction=True)

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    async def lrange(self, key: str, start: int, end: int) -> List[str]:
        return await self.redis.lrange(key, start, end)

    async def hgetall(self, key: str) -> Dict[str, str]:
        return await self.redis.hgetall(key)

    async def scard(self, key: str) -> int:
        return await self.redis.scard(key)


redis_client = RedisClient()


async def get_redis() -> RedisClient:
    if redis_client.redis is None:
        await redis_client.connect()
    return redis_client
