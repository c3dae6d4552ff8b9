"""Helpers for discovering databases and layouts on a FileMaker Server.

These calls are not tied to a client handle. Each one opens its own HTTP
client and authenticates independently.
"""

import logging

import httpx

from ..client.http import JSON_HEADERS, bearer_headers, open_http_client
from ..client.session import request_session_token
from ..config import FilemakerConfig, resolve_base_url
from ..errors import FilemakerError
from .common import database_url, decode_json, extract_names, get_response_field

logger = logging.getLogger("filemaker_lib.operations.discovery")


async def list_databases(
    username: str,
    password: str,
    *,
    config: FilemakerConfig | None = None,
) -> list[str]:
    """Return the names of the databases hosted on the server.

    The ``/databases`` endpoint takes HTTP Basic auth directly, without a
    session token.

    Args:
        username: FileMaker account name.
        password: FileMaker account password.
        config: HTTP settings; defaults to ``FilemakerConfig.from_env()``.

    Returns:
        Database names from ``response.databases[*].name``.

    Raises:
        FilemakerError: On transport failure, a non-2xx status, an invalid
            JSON body, or a response without a ``databases`` list.

    """
    url = f"{resolve_base_url()}/databases"
    logger.debug("Fetching list of databases from URL: %s", url)
    async with open_http_client(config or FilemakerConfig.from_env()) as http_client:
        try:
            response = await http_client.get(url, auth=(username, password), headers=JSON_HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to send request for databases: %s", exc)
            msg = f"Network error while listing databases: {exc}"
            raise FilemakerError(msg) from exc
        payload = decode_json(response, action="list databases")

    databases = get_response_field(payload, "databases")
    if not isinstance(databases, list):
        logger.error("Failed to retrieve databases from response: %s", payload)
        msg = "Failed to retrieve databases"
        raise FilemakerError(msg)

    logger.info("Database list retrieved successfully")
    return extract_names(databases)


async def list_layouts(
    username: str,
    password: str,
    database: str,
    *,
    config: FilemakerConfig | None = None,
) -> list[str]:
    """Return the names of the top-level layouts of ``database``.

    Args:
        username: FileMaker account name.
        password: FileMaker account password.
        database: Raw (unencoded) database name.
        config: HTTP settings; defaults to ``FilemakerConfig.from_env()``.

    Returns:
        Layout names from ``response.layouts[*].name``.

    Raises:
        FilemakerError: If authentication fails or the response has no
            ``layouts`` list.

    """
    url = f"{database_url(database)}/layouts"
    logger.debug("Fetching layouts from URL: %s", url)
    async with open_http_client(config or FilemakerConfig.from_env()) as http_client:
        token = await request_session_token(http_client, database, username, password)
        try:
            response = await http_client.get(url, headers=bearer_headers(token))
        except httpx.HTTPError as exc:
            logger.error("Failed to send request to retrieve layouts: %s", exc)
            msg = f"Network error while listing layouts of '{database}': {exc}"
            raise FilemakerError(msg) from exc
        payload = decode_json(response, action="list layouts")

    layouts = get_response_field(payload, "layouts")
    if not isinstance(layouts, list):
        logger.error("Failed to retrieve layouts from response: %s", payload)
        msg = "Failed to retrieve layouts"
        raise FilemakerError(msg)

    logger.info("Successfully retrieved layouts")
    return extract_names(layouts)


async def remove_database(
    database: str,
    username: str,
    password: str,
    *,
    config: FilemakerConfig | None = None,
) -> None:
    """Send a delete request for ``database`` using a fresh session token.

    Raises:
        FilemakerError: If authentication or the delete request fails.

    """
    url = database_url(database)
    logger.debug("Deleting database: %s", database)
    async with open_http_client(config or FilemakerConfig.from_env()) as http_client:
        token = await request_session_token(http_client, database, username, password)
        try:
            response = await http_client.delete(url, headers=bearer_headers(token))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to delete database %s: %s", database, exc)
            msg = f"Failed to delete database '{database}': {exc}"
            raise FilemakerError(msg) from exc
    logger.info("Database %s deleted successfully", database)


__all__ = ["list_databases", "list_layouts", "remove_database"]
