class RatesError(Exception):
	def __init__(
		self,
		message: str = '',
		*,
		from_currency: str | None = None,
		to_currency: str | None = None,
		date_segment: str | None = None,
	):
		super().__init__(message)
		self.message = message
		self.from_currency = from_currency
		self.to_currency = to_currency
		self.date_segment = date_segment

	def annotate(self, from_currency: str, to_currency: str, date_segment: str) -> 'RatesError':
		"""Return an error of the same class carrying the query that triggered it."""
		message = f'{self.message} [{from_currency}/{to_currency} at {date_segment}]'
		return type(self)(
			message,
			from_currency=from_currency,
			to_currency=to_currency,
			date_segment=date_segment,
		)


class InvalidArgumentError(RatesError, ValueError):
	pass


class FetchFailedError(RatesError):
	pass


class ParseFailedError(RatesError):
	pass


class RateNotFoundError(RatesError, LookupError):
	pass


class DivideByZeroError(RatesError, ZeroDivisionError):
	pass


class CacheError(RatesError):
	pass
