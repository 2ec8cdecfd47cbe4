import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.rates import (
	CacheError,
	DivideByZeroError,
	FetchFailedError,
	InvalidArgumentError,
	ParseFailedError,
	RateNotFoundError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidArgumentError)
	async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(RateNotFoundError)
	async def rate_not_found_handler(request: Request, exc: RateNotFoundError):
		return JSONResponse(status_code=404, content={'detail': str(exc)})

	@app.exception_handler(DivideByZeroError)
	async def divide_by_zero_handler(request: Request, exc: DivideByZeroError):
		logger.error(f'Unusable rate data: {exc}')
		return JSONResponse(status_code=422, content={'detail': str(exc)})

	@app.exception_handler(FetchFailedError)
	@app.exception_handler(ParseFailedError)
	@app.exception_handler(CacheError)
	async def upstream_error_handler(request: Request, exc: Exception):
		logger.error(f'Upstream error: {exc}')
		return JSONResponse(
			status_code=503, content={'detail': 'Exchange rate service unavailable'}
		)
