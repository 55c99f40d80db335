import pytest
from httpx import AsyncClient, ASGITransport

from bundle_analyzer.config import Settings
from bundle_analyzer.llm_client import CommunicationError
from bundle_analyzer.main import create_app

from tests.helpers import FakeGateway


@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def failing_gateway():
    return FakeGateway(error=CommunicationError())


@pytest.fixture
def make_client(settings):
    """Build an async test client around an app using the given gateway."""

    def _make(gateway, app_settings=None):
        app = create_app(app_settings or settings, gateway=gateway)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _make
