from decimal import Decimal

from domain.exceptions.rates import DivideByZeroError, RateNotFoundError
from domain.models.rates import RateTable, normalize_currency


class RateResolver:
    """Answers point queries against one rate table.

    Lookup order is fixed: identity, direct entry, then the anchor block
    (anchor->to, from->anchor inverse, and triangulation through the anchor).
    A direct cross-rate always wins over a derived one.
    """

    def __init__(self, anchor: str = "eur"):
        self.anchor = normalize_currency(anchor)

    def resolve(self, table: RateTable, from_currency: str, to_currency: str) -> Decimal:
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)

        if source == target:
            return Decimal(1)

        direct = table.get(source, target)
        if direct is not None:
            return direct

        anchor_rates = table.rates.get(self.anchor)
        if anchor_rates is None:
            raise RateNotFoundError(
                f"Exchange rate not found for {source}/{target}: no {self.anchor} rates available",
                from_currency=source,
                to_currency=target,
            )

        if source == self.anchor and target in anchor_rates:
            return anchor_rates[target]

        if target == self.anchor and source in anchor_rates:
            return self._divide(Decimal(1), anchor_rates[source], source, target)

        to_rate = anchor_rates.get(target)
        from_rate = anchor_rates.get(source)
        if to_rate is None or from_rate is None:
            raise RateNotFoundError(
                f"Exchange rate not found for {source}/{target}",
                from_currency=source,
                to_currency=target,
            )

        return self._divide(to_rate, from_rate, source, target)

    def _divide(self, numerator: Decimal, divisor: Decimal, source: str, target: str) -> Decimal:
        if divisor == 0:
            raise DivideByZeroError(
                f"{self.anchor}/{source} rate is zero, cannot derive {source}/{target}",
                from_currency=source,
                to_currency=target,
            )
        return numerator / divisor
