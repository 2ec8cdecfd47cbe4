import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal

from domain.exceptions.rates import InvalidArgumentError
from domain.models.rates import RateTable, to_decimal

logger = logging.getLogger(__name__)

RateSource = RateTable | Mapping[str, Mapping[str, Decimal] | None] | None


class RateMerger:
    """Deep, key-wise union of rate tables where later sources win per entry."""

    @staticmethod
    def merge(*sources: RateSource, now: datetime | None = None) -> RateTable:
        merged: dict[str, dict[str, Decimal]] = {}

        for source in sources:
            section = source.rates if isinstance(source, RateTable) else source
            if not isinstance(section, Mapping):
                continue

            for base, quotes in section.items():
                if not _is_code(base) or not isinstance(quotes, Mapping):
                    continue

                inner = merged.setdefault(base.strip().lower(), {})
                for quote, value in quotes.items():
                    if not _is_code(quote):
                        continue
                    rate = _to_rate(value)
                    if rate is None:
                        logger.warning(f'Skipping unusable rate for {base}/{quote}: {value!r}')
                        continue
                    inner[quote.strip().lower()] = rate

        merged_at = now or datetime.now(UTC)
        logger.debug(f'Merged {len(sources)} sources into {len(merged)} base currencies')
        return RateTable(date=merged_at.date(), rates=merged)


def _is_code(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _to_rate(value) -> Decimal | None:
    try:
        rate = to_decimal(value)
    except InvalidArgumentError:
        return None
    return rate if rate >= 0 else None
