import re
from datetime import date

import aiohttp
import pytest
import pytest_asyncio
from aioresponses import aioresponses

from layerup_app.config import settings


@pytest.fixture
def mock_http():
    with aioresponses() as mocked:
        yield mocked


@pytest_asyncio.fixture
async def http():
    async with aiohttp.ClientSession() as session:
        yield session


@pytest.fixture
def url_pattern():
    """Matches a base URL with any query string."""
    def _pattern(base):
        return re.compile("^" + re.escape(base) + r"(\?.*)?$")
    return _pattern


@pytest.fixture
def requested(mock_http):
    """URLs (with their query) that were sent to a given base URL."""
    def _requested(base):
        return [url for (method, url) in mock_http.requests if str(url).split("?")[0] == base]
    return _requested


@pytest.fixture
def today():
    return date(2026, 2, 10)


@pytest.fixture
def yesterday():
    return date(2026, 2, 9)


@pytest.fixture(autouse=True)
def no_api_keys(monkeypatch):
    monkeypatch.setattr(settings, "WEATHERAPI_KEY", "")
    monkeypatch.setattr(settings, "OPENWEATHER_KEY", "")
    monkeypatch.setattr(settings, "VISUALCROSSING_KEY", "")
