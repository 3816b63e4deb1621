"""Pytest configuration and shared fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from techdebt.main import app


@pytest.fixture
async def client():
    """HTTP client bound to the ASGI app (no network, no lifespan)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
