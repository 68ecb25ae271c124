"""
Tests for the Prometheus metrics endpoint.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_metrics_endpoint_exists(client: AsyncClient):
    response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_metrics_record_requests(client: AsyncClient):
    await client.get("/")
    await client.get("/users/99999")

    response = await client.get("/metrics")
    content = response.text

    assert "# HELP" in content or "# TYPE" in content
    assert "http_request" in content
    assert 'handler="/users/{user_id}"' in content
