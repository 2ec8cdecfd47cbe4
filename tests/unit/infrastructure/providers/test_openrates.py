# nosec B101


from datetime import date
from decimal import Decimal

import pytest

from domain.exceptions.rates import FetchFailedError, ParseFailedError
from infrastructure.providers.openrates import OpenRatesProvider


TEMPLATE = 'https://cdn.example.test/data/{date}.json'


def provider_for(fetcher, **kwargs) -> OpenRatesProvider:
	return OpenRatesProvider(fetcher=fetcher, url_template=TEMPLATE, **kwargs)


def test_build_url_uses_latest_or_iso_date(fetcher):
	provider = provider_for(fetcher)

	assert provider.build_url() == 'https://cdn.example.test/data/latest.json'
	assert provider.build_url(date(2025, 10, 30)) == 'https://cdn.example.test/data/2025-10-30.json'


@pytest.mark.asyncio
async def test_fetch_anchor_block_becomes_bidirectional(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response({
		'date': '2025-10-30',
		'rates': {'EUR': {'USD': 1.08, 'GBP': 0.85}},
	})

	table = await provider_for(fetcher).fetch()

	assert table.date == date(2025, 10, 30)
	assert dict(table.rates['eur']) == {'usd': Decimal('1.08'), 'gbp': Decimal('0.85')}
	assert dict(table.rates['usd']) == {'eur': Decimal(1) / Decimal('1.08')}
	assert dict(table.rates['gbp']) == {'eur': Decimal(1) / Decimal('0.85')}
	mock_client.get.assert_called_once_with('https://cdn.example.test/data/latest.json')


@pytest.mark.asyncio
async def test_fetch_dated_requests_dated_document(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response({'date': '2025-10-30', 'rates': {'eur': {'usd': 1.08}}})

	await provider_for(fetcher).fetch(date(2025, 10, 30))

	mock_client.get.assert_called_once_with('https://cdn.example.test/data/2025-10-30.json')


@pytest.mark.asyncio
async def test_published_cross_rates_are_kept(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response({
		'date': '2025-10-30',
		'rates': {
			'eur': {'usd': 1.1},
			'usd': {'eur': 0.9, 'gbp': 0.77},
		},
	})

	table = await provider_for(fetcher).fetch()

	assert dict(table.rates['usd']) == {'eur': Decimal('0.9'), 'gbp': Decimal('0.77')}


@pytest.mark.asyncio
@pytest.mark.parametrize('payload', [None, {'date': '2025-10-30'}, {'date': '2025-10-30', 'rates': None}])
async def test_missing_rates_yield_empty_table(mock_client, fetcher, payload, make_response):
	mock_client.get.return_value = make_response(payload)

	table = await provider_for(fetcher).fetch(date(2025, 10, 30))

	assert table.is_empty
	assert table.date == date(2025, 10, 30)


@pytest.mark.asyncio
async def test_missing_date_defaults_to_today(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response({'rates': {'eur': {'usd': 1.1}}})

	table = await provider_for(fetcher).fetch()

	assert table.date is not None
	assert table.rates['eur']['usd'] == Decimal('1.1')


@pytest.mark.asyncio
async def test_null_blocks_and_blank_keys_are_skipped(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response({
		'date': '2025-10-30',
		'rates': {'eur': {'usd': 1.1, '': 2}, 'gbp': None, ' ': {'usd': 1}},
	})

	table = await provider_for(fetcher).fetch()

	assert set(table.rates) == {'eur', 'usd'}
	assert dict(table.rates['eur']) == {'usd': Decimal('1.1')}


@pytest.mark.asyncio
async def test_invalid_json_is_parse_failed(mock_client, fetcher, make_response):
	mock_client.get.return_value = make_response(ValueError('Expecting value'))

	with pytest.raises(ParseFailedError) as exc_info:
		await provider_for(fetcher).fetch()

	assert 'parsing error' in str(exc_info.value).lower()


@pytest.mark.asyncio
@pytest.mark.parametrize('payload', [
	[1, 2, 3],
	{'rates': ['eur']},
	{'rates': {'eur': 1.1}},
	{'rates': {'eur': {'usd': 'abc'}}},
	{'rates': {'eur': {'usd': True}}},
	{'rates': {'eur': {'usd': {'value': 1}}}},
	{'rates': {'eur': {'usd': -1.1}}},
	{'rates': {'eur': {'usd': 0}}},
	{'date': 'yesterday', 'rates': {}},
])
async def test_malformed_documents_are_parse_failed(mock_client, fetcher, payload, make_response):
	mock_client.get.return_value = make_response(payload)

	with pytest.raises(ParseFailedError):
		await provider_for(fetcher).fetch()


@pytest.mark.asyncio
async def test_http_error_is_fetch_failed(mock_client, fetcher, status_error):
	mock_client.get.side_effect = status_error(404, 'Not Found')

	with pytest.raises(FetchFailedError) as exc_info:
		await provider_for(fetcher).fetch(date(1999, 1, 1))

	assert '404' in str(exc_info.value)
