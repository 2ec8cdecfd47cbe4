import json
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from redis import asyncio as redis

from domain.exceptions.rates import CacheError


class RedisRateCache:
    def __init__(self, redis_client: redis.Redis, ttl: timedelta = timedelta(hours=12)):
        self.redis = redis_client
        self.rate_ttl = ttl

    async def get_rate(self, key: str) -> Decimal | None:
        data = await self.redis.get(key)

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return Decimal(rate_dict["rate"])
        except (json.JSONDecodeError, KeyError, TypeError, InvalidOperation) as e:
            raise CacheError(f"Invalid json data cached under {key}") from e

    async def set_rate(self, key: str, rate: Decimal) -> None:
        await self.redis.setex(key, self.rate_ttl, json.dumps({"rate": str(rate)}))
