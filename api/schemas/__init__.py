from .responses import ConversionResponse, ExchangeRateResponse, HealthResponse

__all__ = [
	'ConversionResponse',
	'ExchangeRateResponse',
	'HealthResponse',
]
