import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.dependencies import cleanup_dependencies, init_dependencies
from api.error_handlers import register_exception_handlers
from api.routes import rates
from config.logging_config import configure_logging
from config.settings import get_settings

settings = get_settings()
configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	logger.info('Starting OpenRates API...')

	init_dependencies()

	logger.info('Application ready')

	yield

	logger.info('Shutting down...')
	await cleanup_dependencies()


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
	logger.error(f'Unhandled exception: {exc}', exc_info=True)
	return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


app.include_router(rates.router)
app.include_router(rates.health_router)
register_exception_handlers(app)


if __name__ == '__main__':
	import uvicorn

	uvicorn.run('api.main:app', host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
