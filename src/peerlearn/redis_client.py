"""Shared Redis client.

Redis is optional here: when no URL is configured the client is never created
and callers that use ``get_optional_redis`` skip rate limiting and the
completion broadcast.
"""

import redis.asyncio as redis

_client: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 20) -> None:
    global _client  # noqa: PLW0603
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
    _client = None


def get_optional_redis() -> redis.Redis | None:
    """FastAPI dependency: the client, or None when Redis is disabled."""
    return _client
