import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ExchangeRateResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	rate: Decimal = Field(..., description='Units of to_currency per unit of from_currency')
	date: datetime.date = Field(..., description='Effective date the rate was resolved for')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'EUR',
				'to_currency': 'USD',
				'rate': '1.0845',
				'date': '2025-10-30',
			}
		}
	)


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	original_amount: Decimal = Field(..., description='Original amount requested')
	converted_amount: Decimal = Field(..., description='Converted amount')
	exchange_rate: Decimal = Field(..., description='Exchange rate used for conversion')
	date: datetime.date = Field(..., description='Effective date the rate was resolved for')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'USD',
				'to_currency': 'GBP',
				'original_amount': '100.00',
				'converted_amount': '77.27',
				'exchange_rate': '0.7727',
				'date': '2025-10-30',
			}
		}
	)


class HealthResponse(BaseModel):
	status: str = Field(default='ok')
