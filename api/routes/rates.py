import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_conversion_service, get_rate_service
from api.schemas import ConversionResponse, ExchangeRateResponse, HealthResponse
from application.services import ConversionService, RateService

router = APIRouter(prefix='/api', tags=['rates'])

CurrencyCode = Annotated[str, Path(min_length=3, max_length=5)]
AtDate = Annotated[
	datetime.date | None,
	Query(description='Effective date (YYYY-MM-DD); omit for the latest rates'),
]


@router.get(
	'/rate/{from_currency}/{to_currency}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get exchange rate',
)
async def get_exchange_rate(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	service: Annotated[RateService, Depends(get_rate_service)],
	at: AtDate = None,
) -> ExchangeRateResponse:
	rate = await service.get_rate(from_currency, to_currency, at)
	return ExchangeRateResponse(
		from_currency=from_currency.upper(),
		to_currency=to_currency.upper(),
		rate=rate,
		date=service.effective_date(at),
	)


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: CurrencyCode,
	to_currency: CurrencyCode,
	amount: Annotated[Decimal, Path(gt=0)],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
	at: AtDate = None,
) -> ConversionResponse:
	result = await service.convert(amount, from_currency.upper(), to_currency.upper(), at)
	return ConversionResponse(**result)


health_router = APIRouter(tags=['health'])


@health_router.get('/health', response_model=HealthResponse)
async def health() -> HealthResponse:
	return HealthResponse(status='ok')
