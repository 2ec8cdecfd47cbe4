from decimal import Decimal
from typing import Protocol


class RateCache(Protocol):
    async def get_rate(self, key: str) -> Decimal | None: ...

    async def set_rate(self, key: str, rate: Decimal) -> None: ...
