"""Middleware tests: request ID, rate limiting, CORS, error shape."""

import json
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from peerlearn.config import Settings, get_settings
from peerlearn.main import create_app
from peerlearn.middleware import rate_limit
from peerlearn.middleware.logging import HANDLER_NAME, setup_logging
from tests.helpers import auth_headers, make_user


def _fake_redis(count: int) -> MagicMock:
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[count, True])
    redis = MagicMock()
    redis.pipeline.return_value = pipe
    return redis


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert len(response.headers["x-request-id"]) == 36


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_without_redis(client: AsyncClient, db_session) -> None:
    user = await make_user(db_session)
    response = await client.get("/api/v1/courses/domains", headers=auth_headers(user.id))
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient, db_session, monkeypatch) -> None:
    user = await make_user(db_session)
    monkeypatch.setattr(rate_limit, "get_optional_redis", lambda: _fake_redis(3))
    response = await client.get("/api/v1/courses/domains", headers=auth_headers(user.id))
    assert response.status_code == 200
    assert response.headers["x-ratelimit-limit"] == "100"
    assert response.headers["x-ratelimit-remaining"] == "97"


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr(rate_limit, "get_optional_redis", lambda: _fake_redis(101))
    response = await client.get("/api/v1/courses/domains")
    assert response.status_code == 429
    assert response.headers["retry-after"] == "60"
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_probes_exempt_from_rate_limit(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr(rate_limit, "get_optional_redis", lambda: _fake_redis(10_000))
    for path in ("/health", "/version"):
        response = await client.get(path)
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    response = await client.options(
        "/api/v1/courses",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.headers["content-type"] == "application/json"
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_validation_error_shape(client: AsyncClient, db_session) -> None:
    user = await make_user(db_session)
    response = await client.post("/api/v1/enrollments", json={}, headers=auth_headers(user.id))
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Validation error"
    assert data["errors"]


@pytest.mark.asyncio
async def test_cors_preflight_without_credentials(client: AsyncClient) -> None:
    response = await client.options(
        "/api/v1/courses",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "PATCH"},
    )
    assert "access-control-allow-credentials" not in response.headers
    assert "PATCH" in response.headers["access-control-allow-methods"]


@pytest.mark.asyncio
async def test_cors_unknown_origin_rejected(client: AsyncClient) -> None:
    response = await client.options(
        "/api/v1/courses",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
    )
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.asyncio
async def test_cors_origin_regex(database, monkeypatch) -> None:
    monkeypatch.setenv("PEERLEARN_CORS_ORIGIN_REGEX", r"https://.*\.peerlearn\.app")
    get_settings.cache_clear()
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.options(
            "/api/v1/courses",
            headers={"Origin": "https://pr-42.peerlearn.app", "Access-Control-Request-Method": "GET"},
        )
    assert response.headers["access-control-allow-origin"] == "https://pr-42.peerlearn.app"


def test_cors_origins_from_comma_separated_env(monkeypatch) -> None:
    monkeypatch.setenv("PEERLEARN_CORS_ORIGINS", "https://app.example, https://admin.example")
    assert Settings().cors_origins == ["https://app.example", "https://admin.example"]


def test_service_logs_render_with_request_id(capsys) -> None:
    """stdlib records from service modules go through the structlog formatter."""
    setup_logging(Settings(log_format="json", log_level="INFO"))
    structlog.contextvars.bind_contextvars(request_id="req-1")
    try:
        logging.getLogger("peerlearn.courses.service").info("Course %s created", "c-1")
    finally:
        structlog.contextvars.clear_contextvars()
        root = logging.getLogger()
        for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
            root.removeHandler(handler)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "Course c-1 created"
    assert record["request_id"] == "req-1"
    assert record["logger"] == "peerlearn.courses.service"
    assert record["level"] == "info"
