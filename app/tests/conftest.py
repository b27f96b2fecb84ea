import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_mail_gateway, get_pdf_service
from app.main import app
from app.rate_limiter import api_rate_limiter, reset_rate_limits
from app.tests.fixtures.services import *


async def _no_rate_limit():
    return None


def _build_client(pdf_service, gateway, rate_limited=False):
    app.dependency_overrides[get_pdf_service] = lambda: pdf_service
    app.dependency_overrides[get_mail_gateway] = lambda: gateway
    if not rate_limited:
        app.dependency_overrides[api_rate_limiter] = _no_rate_limit
    return TestClient(app)


@pytest.fixture(scope="function")
def client(pdf_service, simulated_gateway):
    """TestClient with the services replaced and rate limiting off. Debug mode is off."""
    yield _build_client(pdf_service, simulated_gateway)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def debug_client(debug_pdf_service, simulated_gateway):
    """TestClient like `client`, with PDF debug mode on."""
    yield _build_client(debug_pdf_service, simulated_gateway)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def rate_limited_client(pdf_service, simulated_gateway):
    reset_rate_limits()
    yield _build_client(pdf_service, simulated_gateway, rate_limited=True)
    app.dependency_overrides.clear()
    reset_rate_limits()
