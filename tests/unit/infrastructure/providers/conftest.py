from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from infrastructure.providers.http import HttpFetcher

ECB_DAILY_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01" xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
	<gesmes:subject>Reference rates</gesmes:subject>
	<gesmes:Sender>
		<gesmes:name>European Central Bank</gesmes:name>
	</gesmes:Sender>
	<Cube>
		<Cube time='2025-10-30'>
			<Cube currency='USD' rate='1.1'/>
			<Cube currency='JPY' rate='160.25'/>
			<Cube currency='GBP' rate='0.85'/>
		</Cube>
	</Cube>
</gesmes:Envelope>
"""

ECB_HISTORY_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01" xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
	<Cube>
		<Cube time="2025-10-30">
			<Cube currency="USD" rate="1.1"/>
		</Cube>
		<Cube time="2025-10-29">
			<Cube currency="USD" rate="1.0950"/>
			<Cube currency="GBP" rate="0.8700"/>
		</Cube>
	</Cube>
</gesmes:Envelope>
"""


def _make_response(json_data=None, content: bytes = b'', status_code: int = 200):
	response = Mock()
	response.status_code = status_code
	response.content = content
	response.raise_for_status = Mock()
	if isinstance(json_data, Exception):
		response.json.side_effect = json_data
	else:
		response.json.return_value = json_data
	return response


def _status_error(status_code: int, text: str = 'error') -> httpx.HTTPStatusError:
	error_response = Mock()
	error_response.status_code = status_code
	error_response.text = text
	return httpx.HTTPStatusError('HTTP error', request=Mock(), response=error_response)


@pytest.fixture
def mock_client():
	return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def fetcher(mock_client):
	return HttpFetcher(client=mock_client, retry_attempts=1)


@pytest.fixture
def make_response():
	return _make_response


@pytest.fixture
def status_error():
	return _status_error


@pytest.fixture
def ecb_daily_xml():
	return ECB_DAILY_XML


@pytest.fixture
def ecb_history_xml():
	return ECB_HISTORY_XML
