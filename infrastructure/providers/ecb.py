import logging
import xml.etree.ElementTree as ET
from datetime import date
from decimal import Decimal, InvalidOperation

from domain.exceptions.rates import InvalidArgumentError, ParseFailedError
from domain.models.rates import RateTable, normalize_currency, utc_today
from infrastructure.providers.base import build_bidirectional
from infrastructure.providers.http import HttpFetcher

logger = logging.getLogger(__name__)


class EcbProvider:
	"""European Central Bank reference rates, all quoted against EUR."""

	DAILY_URL = 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml'
	HISTORY_URL = 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-hist-90d.xml'
	BASE_CURRENCY = 'eur'

	def __init__(
		self,
		fetcher: HttpFetcher | None = None,
		anchor: str = 'eur',
		daily_url: str | None = None,
		history_url: str | None = None,
	):
		self._fetcher = fetcher or HttpFetcher()
		self.anchor = normalize_currency(anchor)
		if self.anchor != self.BASE_CURRENCY:
			raise InvalidArgumentError(
				f'ECB publishes {self.BASE_CURRENCY} based rates only, cannot anchor on {self.anchor}'
			)
		self.daily_url = daily_url or self.DAILY_URL
		self.history_url = history_url or self.HISTORY_URL

	@property
	def name(self) -> str:
		return 'ecb'

	async def fetch(self, at: date | None = None) -> RateTable:
		url = self.daily_url if at is None else self.history_url
		logger.info(f'Fetching ECB exchange rates from {url}')

		response = await self._fetcher.get(url, source='ECB')
		table = self._parse(response.content, at)

		if table.is_empty:
			logger.warning(f'No currency rates found in ECB response (requested {at or "latest"})')
		else:
			logger.info(f'Fetched {len(table.rates[self.anchor])} ECB exchange rates for {table.date}')
		return table

	def _parse(self, xml: bytes, at: date | None) -> RateTable:
		try:
			root = ET.fromstring(xml)
		except ET.ParseError as e:
			logger.error(f'Failed to parse ECB exchange rates: {e}')
			raise ParseFailedError(f'ECB response parsing error: {e}') from e

		day_cube = self._select_day(root, at)
		if day_cube is None:
			return RateTable(date=at or utc_today(), rates={}, source=self.name)

		try:
			rate_date = date.fromisoformat(day_cube.get('time'))
			anchor_rates = {
				cube.get('currency').lower(): Decimal(cube.get('rate'))
				for cube in day_cube
				if _local(cube.tag) == 'Cube' and cube.get('currency')
			}
			for currency, rate in anchor_rates.items():
				if not rate.is_finite():
					raise ValueError(f'rate for {currency} is not finite: {rate}')
		except (TypeError, ValueError, InvalidOperation) as e:
			logger.error(f'Failed to parse ECB exchange rates: {e}')
			raise ParseFailedError(f'ECB response parsing error: {e}') from e

		if not anchor_rates:
			return RateTable(date=rate_date, rates={}, source=self.name)

		return RateTable(
			date=rate_date,
			rates=build_bidirectional(self.anchor, anchor_rates, 'ECB'),
			source=self.name,
		)

	@staticmethod
	def _select_day(root: ET.Element, at: date | None) -> ET.Element | None:
		day_cubes = [
			element for element in root.iter() if _local(element.tag) == 'Cube' and element.get('time')
		]
		if at is None:
			return day_cubes[0] if day_cubes else None

		wanted = at.isoformat()
		return next((cube for cube in day_cubes if cube.get('time') == wanted), None)

	async def close(self) -> None:
		await self._fetcher.close()


def _local(tag: str) -> str:
	return tag.rsplit('}', 1)[-1]
