import pytest
import inspect
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.auction import get_fee_config
from app.core.config import settings
from app.core.rate_limit import FixedWindowRateLimiter, get_rate_limiter
from app.schemas.auction import FeeConfig


@pytest.fixture
def fee_config():
    """Default fee schedule, independent of the environment"""
    return FeeConfig()


@pytest.fixture
def rate_limiter():
    limiter = FixedWindowRateLimiter(
        permit_limit=settings.RATE_LIMIT,
        window_seconds=settings.RATE_LIMIT_WINDOW,
        queue_limit=settings.RATE_LIMIT_QUEUE_LIMIT,
    )
    yield limiter
    limiter.reset()


@pytest.fixture(autouse=True)
def override_dependencies(fee_config, rate_limiter):
    app.dependency_overrides[get_fee_config] = lambda: fee_config
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def test_client_no_raise():
    """Client that returns the 500 response instead of re-raising server errors"""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def valid_calculation_data():
    return {
        "vehiclePrice": 398.0,
        "vehicleType": "Common"
    }


class FakeCache:
    """Dict-backed stand-in for the async Redis get/set calls used by the cache"""

    def __init__(self, fail: bool = False):
        self.store = {}
        self.fail = fail
        self.set_calls = []

    async def get(self, key):
        if self.fail:
            raise ConnectionError("cache unavailable")
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise ConnectionError("cache unavailable")
        self.set_calls.append((key, ex))
        self.store[key] = value


@pytest.fixture
def fake_cache(monkeypatch):
    cache = FakeCache()
    monkeypatch.setattr("app.api.auction.get_redis", lambda: cache)
    return cache


@pytest.fixture
def failing_cache(monkeypatch):
    cache = FakeCache(fail=True)
    monkeypatch.setattr("app.api.auction.get_redis", lambda: cache)
    return cache


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "fees: marks tests related to fee calculation"
    )
    config.addinivalue_line(
        "markers", "rate_limit: marks tests related to rate limiting"
    )
    config.addinivalue_line(
        "markers", "client: marks tests related to the HTTP client"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if inspect.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
