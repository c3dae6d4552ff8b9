"""HTTP client setup for the FileMaker Data API.

Provides the shared ``httpx.AsyncClient`` factory used by client handles and
an async context manager for one-shot calls such as database discovery.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from ..config import FilemakerConfig

JSON_HEADERS = {"Content-Type": "application/json"}


def build_http_client(config: FilemakerConfig) -> httpx.AsyncClient:
    """Create an HTTP client with the configured TLS verification and timeout.

    Certificate verification is off unless ``verify_ssl`` is set.

    Args:
        config: The configuration containing TLS verification and timeouts.

    Returns:
        A new ``httpx.AsyncClient``; the caller owns it and must close it.

    """
    timeout = httpx.Timeout(config.timeout_seconds)
    return httpx.AsyncClient(verify=config.verify_ssl, timeout=timeout)


@asynccontextmanager
async def open_http_client(config: FilemakerConfig) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a short-lived HTTP client that is closed on exit.

    Args:
        config: The configuration containing TLS verification and timeouts.

    Yields:
        Configured ``httpx.AsyncClient`` instance.

    """
    async with build_http_client(config) as client:
        yield client


def bearer_headers(token: str) -> dict[str, str]:
    """Build the JSON request headers carrying a bearer token."""
    return {"Authorization": f"Bearer {token}", **JSON_HEADERS}


__all__ = ["JSON_HEADERS", "bearer_headers", "build_http_client", "open_http_client"]
