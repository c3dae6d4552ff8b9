"""Session token handling for the FileMaker Data API."""

import asyncio
import logging

import httpx

from ..errors import FilemakerError
from ..operations.common import database_url, decode_json, get_response_field
from .http import JSON_HEADERS, bearer_headers

logger = logging.getLogger("filemaker_lib.session")


def _failure_reason(exc: httpx.HTTPError) -> str:
    """Describe a failed request without echoing its URL."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return type(exc).__name__


class SessionToken:
    """Hold a bearer token shared by every call on a client handle.

    The token is set once when the handle connects and is never refreshed.
    Reads and writes go through an asyncio lock so concurrent calls do not
    race on the stored value.
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the holder.

        Args:
            token: An already acquired bearer token, if any.

        """
        self._token = token
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    def _ensure_lock(self) -> asyncio.Lock:
        """Return an asyncio lock bound to the current event loop.

        Creates a new lock if one does not exist or if the event loop has changed.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def get(self) -> str:
        """Return the stored token.

        Raises:
            FilemakerError: If no token is held.

        """
        async with self._ensure_lock():
            token = self._token
        if not token:
            logger.error("No session token found")
            msg = "No session token found"
            raise FilemakerError(msg)
        return token

    async def peek(self) -> str | None:
        """Return the stored token, or None when the holder is empty."""
        async with self._ensure_lock():
            return self._token

    async def clear(self) -> str | None:
        """Drop the stored token and return the previous value."""
        async with self._ensure_lock():
            token, self._token = self._token, None
        return token


async def request_session_token(
    http_client: httpx.AsyncClient,
    database: str,
    username: str,
    password: str,
) -> str:
    """Log in to ``database`` with HTTP Basic auth and return the session token.

    Args:
        http_client: The HTTP client to send the request with.
        database: Raw (unencoded) database name.
        username: FileMaker account name.
        password: FileMaker account password.

    Returns:
        The bearer token from ``response.token``.

    Raises:
        FilemakerError: On transport failure, a non-2xx status, an invalid
            JSON body, or a response without a token.

    """
    url = f"{database_url(database)}/sessions"
    logger.debug("Requesting session token from URL: %s", url)
    try:
        response = await http_client.post(
            url,
            auth=(username, password),
            headers=JSON_HEADERS,
            json={},
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.error("Failed to request session token: %s", exc)
        msg = f"Failed to get token from FileMaker API: {exc}"
        raise FilemakerError(msg) from exc

    payload = decode_json(response, action="request a session token")
    token = get_response_field(payload, "token")
    if not isinstance(token, str) or not token:
        logger.error("Failed to get token from FileMaker API response: %s", payload)
        msg = "Failed to get token from FileMaker API"
        raise FilemakerError(msg)

    logger.info("Session token retrieved successfully")
    return token


async def close_session(http_client: httpx.AsyncClient, database: str, token: str) -> None:
    """Invalidate a session token on the server.

    Raises:
        FilemakerError: On transport failure or a non-2xx status.

    """
    url = f"{database_url(database)}/sessions/{token}"
    logger.debug("Closing session for database '%s'", database)
    try:
        response = await http_client.delete(url, headers=bearer_headers(token))
        response.raise_for_status()
    except httpx.HTTPError as exc:
        # The request URL and the chained exception both carry the token
        reason = _failure_reason(exc)
        logger.error("Failed to close session for database '%s': %s", database, reason)
        msg = f"Failed to close FileMaker session: {reason}"
        raise FilemakerError(msg) from None
    logger.info("Session closed for database '%s'", database)


__all__ = ["SessionToken", "close_session", "request_session_token"]
