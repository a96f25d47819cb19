import pytest
from aioresponses import aioresponses


@pytest.fixture
def mock_http():
    """Intercept every aiohttp request made during the test."""

    with aioresponses() as mock:
        yield mock
