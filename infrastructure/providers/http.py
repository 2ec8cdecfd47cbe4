import logging

import httpx
from tenacity import (
	AsyncRetrying,
	before_sleep_log,
	retry_if_exception_type,
	stop_after_attempt,
	wait_exponential,
)

from domain.exceptions.rates import FetchFailedError

logger = logging.getLogger(__name__)


class HttpFetcher:
	"""GET with transport-level retries; HTTP status errors are never retried."""

	def __init__(
		self,
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
		retry_attempts: int = 3,
		retry_backoff: float = 1,
		retry_wait_max: float = 10,
	):
		self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
		self.retry_attempts = max(1, retry_attempts)
		self.retry_backoff = retry_backoff
		self.retry_wait_max = retry_wait_max

	async def get(self, url: str, source: str) -> httpx.Response:
		try:
			async for attempt in AsyncRetrying(
				stop=stop_after_attempt(self.retry_attempts),
				wait=wait_exponential(
					multiplier=self.retry_backoff, min=self.retry_backoff, max=self.retry_wait_max
				),
				retry=retry_if_exception_type(httpx.TransportError),
				before_sleep=before_sleep_log(logger, logging.WARNING),
				reraise=True,
			):
				with attempt:
					response = await self._client.get(url)
					response.raise_for_status()
					return response

		except httpx.HTTPStatusError as e:
			logger.error(f'{source} returned HTTP {e.response.status_code} for {url}')
			raise FetchFailedError(
				f'{source} HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			logger.error(f'{source} request to {url} failed: {e.__class__.__name__}')
			raise FetchFailedError(f'{source} request failed: {e.__class__.__name__}') from e

	async def close(self) -> None:
		await self._client.aclose()
