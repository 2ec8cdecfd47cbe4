import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from domain.exceptions.rates import ParseFailedError
from domain.models.rates import RateTable, normalize_currency, utc_today
from infrastructure.providers.base import build_bidirectional
from infrastructure.providers.http import HttpFetcher

logger = logging.getLogger(__name__)


class OpenRatesProvider:
    """Reads a published ``{date, rates}`` document, ``latest`` or per day."""

    URL_TEMPLATE = "https://cdn.jsdelivr.net/gh/henrikroschmann/OpenRates.NET@main/data/{date}.json"

    def __init__(
        self,
        fetcher: HttpFetcher | None = None,
        anchor: str = "eur",
        url_template: str | None = None,
    ):
        self._fetcher = fetcher or HttpFetcher()
        self.anchor = normalize_currency(anchor)
        self.url_template = url_template or self.URL_TEMPLATE

    @property
    def name(self) -> str:
        return "openrates"

    def build_url(self, at: date | None = None) -> str:
        segment = "latest" if at is None else at.strftime("%Y-%m-%d")
        return self.url_template.format(date=segment)

    async def fetch(self, at: date | None = None) -> RateTable:
        url = self.build_url(at)
        logger.info(f"Fetching published exchange rates from {url}")

        response = await self._fetcher.get(url, source="OpenRates")
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to decode published rates from {url}: {e}")
            raise ParseFailedError(f"OpenRates response parsing error: {e}") from e

        table = self._parse(data, at)
        if table.is_empty:
            logger.warning(f"Published rates at {url} contain no rates")
        else:
            logger.info(f"Fetched {len(table.rates)} base currencies from OpenRates for {table.date}")
        return table

    def _parse(self, data, at: date | None) -> RateTable:
        fallback_date = at or utc_today()
        if data is None:
            return RateTable(date=fallback_date, rates={}, source=self.name)
        if not isinstance(data, dict):
            raise ParseFailedError(f"OpenRates document must be an object, got {type(data).__name__}")

        rate_date = self._parse_date(data.get("date"), fallback_date)

        section = data.get("rates")
        if section is None:
            return RateTable(date=rate_date, rates={}, source=self.name)
        if not isinstance(section, dict):
            raise ParseFailedError("OpenRates 'rates' section must be an object")

        blocks: dict[str, dict[str, Decimal]] = {}
        for base, quotes in section.items():
            if not isinstance(base, str) or not base.strip() or quotes is None:
                continue
            if not isinstance(quotes, dict):
                raise ParseFailedError(f"OpenRates rates for '{base}' must be an object")
            blocks[base.strip().lower()] = {
                quote.strip().lower(): _parse_rate(base, quote, value)
                for quote, value in quotes.items()
                if quote.strip()
            }

        rates: dict[str, dict[str, Decimal]] = {}
        anchor_rates = blocks.get(self.anchor)
        if anchor_rates:
            rates.update(build_bidirectional(self.anchor, anchor_rates, "OpenRates"))

        # Cross rates shipped in the document beat the derived inverses.
        for base, quotes in blocks.items():
            rates.setdefault(base, {}).update(quotes)

        return RateTable(date=rate_date, rates=rates, source=self.name)

    @staticmethod
    def _parse_date(value, fallback: date) -> date:
        if value is None:
            return fallback
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError as e:
            raise ParseFailedError(f"OpenRates document has an invalid date: {value!r}") from e

    async def close(self) -> None:
        await self._fetcher.close()


def _parse_rate(base: str, quote: str, value) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ParseFailedError(f"Rate for {base}/{quote} is not a number: {value!r}")
    try:
        rate = Decimal(str(value))
    except InvalidOperation as e:
        raise ParseFailedError(f"Rate for {base}/{quote} is not a number: {value!r}") from e
    if not rate.is_finite():
        raise ParseFailedError(f"Rate for {base}/{quote} is not a number: {value!r}")
    if rate < 0:
        raise ParseFailedError(f"Rate for {base}/{quote} is negative: {rate}")
    return rate
