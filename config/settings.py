from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'OpenRates API'
	DEBUG: bool = False
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False
	HOST: str = '0.0.0.0'
	PORT: int = 8000

	# Rates
	ANCHOR_CURRENCY: str = 'eur'
	ECB_DAILY_URL: str = 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml'
	ECB_HISTORY_URL: str = 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-hist-90d.xml'
	RATES_URL_TEMPLATE: str = (
		'https://cdn.jsdelivr.net/gh/henrikroschmann/OpenRates.NET@main/data/{date}.json'
	)
	RATE_PROVIDERS: list[Literal['openrates', 'ecb']] = ['openrates']

	# Cache
	CACHE_BACKEND: Literal['memory', 'redis'] = 'memory'
	REDIS_URL: str = 'redis://localhost:6379'
	CACHE_TTL_SECONDS: int = 43200

	# Transport
	HTTP_TIMEOUT: float = 10
	HTTP_RETRY_ATTEMPTS: int = 3

	# Publisher
	PUBLISH_DIRECTORY: str = 'data'

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
