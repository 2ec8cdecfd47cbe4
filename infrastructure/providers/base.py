from datetime import date
from decimal import Decimal
from typing import Protocol

from domain.exceptions.rates import ParseFailedError
from domain.models.rates import RateTable


class ExchangeRateProvider(Protocol):
    @property
    def name(self) -> str: ...

    async def fetch(self, at: date | None = None) -> RateTable: ...

    async def close(self) -> None: ...


def build_bidirectional(
    anchor: str, anchor_rates: dict[str, Decimal], source: str
) -> dict[str, dict[str, Decimal]]:
    """Expand ``anchor -> quote`` rates so every quote also knows its way back to the anchor."""
    rates: dict[str, dict[str, Decimal]] = {anchor: dict(anchor_rates)}

    for quote, rate in anchor_rates.items():
        if quote == anchor:
            continue
        if not rate.is_finite() or rate <= 0:
            raise ParseFailedError(f"{source} returned a non-positive or non-finite rate for {anchor}/{quote}: {rate}")
        rates[quote] = {anchor: Decimal(1) / rate}

    return rates
