from datetime import date, datetime
from decimal import Decimal

from application.services.rate_service import RateService


class ConversionService:
	def __init__(self, rate_service: RateService):
		self.rate_service = rate_service

	async def convert(
		self,
		amount: Decimal,
		from_currency: str,
		to_currency: str,
		at: date | datetime | None = None,
	) -> dict:
		rate = await self.rate_service.get_rate(from_currency, to_currency, at)

		converted_amount = amount * rate

		return {
			'from_currency': from_currency,
			'to_currency': to_currency,
			'original_amount': amount,
			'converted_amount': converted_amount,
			'exchange_rate': rate,
			'date': self.rate_service.effective_date(at),
		}
