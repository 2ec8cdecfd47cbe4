import time
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal


class InMemoryRateCache:
    """Process-local rate cache; entries expire ``ttl`` after they were written."""

    def __init__(self, ttl: timedelta = timedelta(hours=12), clock: Callable[[], float] = time.monotonic):
        self.rate_ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[Decimal, float]] = {}

    async def get_rate(self, key: str) -> Decimal | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        rate, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return rate

    async def set_rate(self, key: str, rate: Decimal) -> None:
        self._entries[key] = (rate, self._clock() + self.rate_ttl.total_seconds())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
