from collections.abc import Mapping
from dataclasses import dataclass, field
import datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from domain.exceptions.rates import InvalidArgumentError

RateMap = Mapping[str, Mapping[str, Decimal]]


def utc_today() -> datetime.date:
	return datetime.datetime.now(datetime.UTC).date()


def normalize_currency(code: str | None) -> str:
	"""Lowercase and strip a currency code, rejecting blank input."""
	if code is None or not str(code).strip():
		raise InvalidArgumentError('Currency code must not be blank')
	return str(code).strip().lower()


def to_decimal(value) -> Decimal:
	if isinstance(value, bool):
		raise InvalidArgumentError(f'Invalid rate value: {value!r}')
	if isinstance(value, Decimal):
		result = value
	else:
		try:
			result = Decimal(str(value))
		except (InvalidOperation, ValueError) as e:
			raise InvalidArgumentError(f'Invalid rate value: {value!r}') from e
	if not result.is_finite():
		raise InvalidArgumentError(f'Invalid rate value: {value!r}')
	return result


@dataclass(frozen=True)
class RateTable:
	"""Date-stamped base -> (quote -> rate) table, read-only once built.

	``rates[base][quote]`` means one unit of ``base`` buys ``rate`` units of ``quote``.
	Zero is accepted in storage; only the resolver treats it as an error.
	"""

	date: datetime.date = field(default_factory=utc_today)
	rates: RateMap = field(default_factory=dict)
	source: str | None = None

	def __post_init__(self):
		if isinstance(self.date, datetime.datetime):
			object.__setattr__(self, 'date', self.date.date())

		frozen: dict[str, Mapping[str, Decimal]] = {}
		for base, quotes in self.rates.items():
			base_code = normalize_currency(base)
			block = dict(frozen.get(base_code, {}))
			for quote, value in quotes.items():
				rate = to_decimal(value)
				if rate < 0:
					raise InvalidArgumentError(f'Negative rate for {base_code}/{quote}: {rate}')
				block[normalize_currency(quote)] = rate
			frozen[base_code] = MappingProxyType(block)

		object.__setattr__(self, 'rates', MappingProxyType(frozen))

	def get(self, from_currency: str, to_currency: str) -> Decimal | None:
		if not from_currency or not from_currency.strip():
			return None
		if not to_currency or not to_currency.strip():
			return None

		block = self.rates.get(from_currency.strip().lower())
		if block is None:
			return None
		return block.get(to_currency.strip().lower())

	@property
	def is_empty(self) -> bool:
		return not self.rates

	@property
	def currencies(self) -> list[str]:
		codes = set(self.rates)
		for quotes in self.rates.values():
			codes.update(quotes)
		return sorted(codes)

	def to_payload(self) -> dict:
		"""Published document shape: ``{"date": ISO date, "rates": {base: {quote: number}}}``."""
		return {
			'date': self.date.isoformat(),
			'rates': {
				base: {quote: float(rate) for quote, rate in quotes.items()}
				for base, quotes in self.rates.items()
			},
		}
