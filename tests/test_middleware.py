"""Middleware tests: request ID, rate limiting, CORS, error handling."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError


def _fake_redis(count: int) -> MagicMock:
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[count, True])
    redis = MagicMock()
    redis.pipeline.return_value = pipe
    return redis


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr("casedesk.middleware.rate_limit.get_redis", lambda: _fake_redis(1))
    response = await client.get("/version")
    assert response.headers["x-ratelimit-remaining"] == "99"
    assert response.headers["x-ratelimit-limit"] == "100"


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, monkeypatch) -> None:
    """101st request in a window returns 429 with Retry-After header."""
    monkeypatch.setattr("casedesk.middleware.rate_limit.get_redis", lambda: _fake_redis(101))
    response = await client.get("/version")
    assert response.status_code == 429
    assert "retry-after" in response.headers
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr("casedesk.middleware.rate_limit.get_redis", lambda: _fake_redis(10_000))
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_redis_outage_lets_requests_through(client: AsyncClient, monkeypatch) -> None:
    redis = _fake_redis(0)
    redis.pipeline.return_value.execute = AsyncMock(side_effect=RedisConnectionError("down"))
    monkeypatch.setattr("casedesk.middleware.rate_limit.get_redis", lambda: redis)
    response = await client.get("/version")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    """Unknown paths return 404 with JSON body."""
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_domain_not_found_maps_to_404(app, client: AsyncClient) -> None:
    from casedesk.notifications.exceptions import CaseNotFoundError

    @app.get("/_raise-not-found")
    async def _raise() -> None:
        raise CaseNotFoundError(5)

    response = await client.get("/_raise-not-found")
    assert response.status_code == 404
    assert response.json() == {"detail": "Case 5 not found"}


@pytest.mark.asyncio
async def test_persistence_error_maps_to_503(app, client: AsyncClient) -> None:
    from casedesk.notifications.exceptions import PersistenceError

    @app.get("/_raise-persistence")
    async def _raise() -> None:
        raise PersistenceError("write failed")

    response = await client.get("/_raise-persistence")
    assert response.status_code == 503
    assert response.json()["detail"] == "Storage temporarily unavailable"
