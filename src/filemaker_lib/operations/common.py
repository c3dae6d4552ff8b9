"""Common utilities for FileMaker Data API operations.

Shared helpers for building endpoint URLs and unwrapping the JSON envelope
``{"response": {...}, "messages": [...]}`` that every Data API call returns.
"""

import logging
from typing import Any, TypeAlias

import httpx

from ..config import encode_parameter, resolve_base_url
from ..errors import FilemakerError

logger = logging.getLogger("filemaker_lib.operations.common")

# Type aliases
Envelope: TypeAlias = dict[str, Any]
Record: TypeAlias = dict[str, Any]
FieldData: TypeAlias = dict[str, Any]


def database_url(database: str) -> str:
    """Build the URL of a database, resolving ``FM_URL`` at call time.

    Args:
        database: The raw (unencoded) database name.

    Returns:
        ``{FM_URL}/databases/{database}`` with the name URL-encoded.

    """
    return f"{resolve_base_url()}/databases/{encode_parameter(database)}"


def layout_url(encoded_database: str, encoded_layout: str, path: str = "") -> str:
    """Build a layout-scoped URL from already encoded names.

    Args:
        encoded_database: URL-encoded database name.
        encoded_layout: URL-encoded layout name.
        path: Optional trailing path such as ``records/12`` or ``_find``.

    Returns:
        ``{FM_URL}/databases/{db}/layouts/{layout}[/{path}]``.

    """
    url = f"{resolve_base_url()}/databases/{encoded_database}/layouts/{encoded_layout}"
    if path:
        url = f"{url}/{path.lstrip('/')}"
    return url


def decode_json(response: httpx.Response, *, action: str) -> Any:
    """Parse a response body as JSON.

    Args:
        response: The HTTP response to decode.
        action: Human-readable description of the call, used in errors.

    Raises:
        FilemakerError: If the body is not valid JSON.

    """
    try:
        return response.json()
    except ValueError as exc:
        logger.error("Failed to parse %s response: %s", action, exc)
        msg = f"Invalid JSON response while trying to {action}: {exc}"
        raise FilemakerError(msg) from exc


def get_response_field(payload: Any, *path: str) -> Any | None:
    """Walk ``payload["response"]`` along ``path``.

    Returns:
        The nested value, or ``None`` when any step is missing or not an object.

    """
    node: Any = payload.get("response") if isinstance(payload, dict) else None
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def extract_names(items: Any) -> list[str]:
    """Return the string ``name`` of each object in ``items``, skipping others."""
    if not isinstance(items, list):
        return []
    names: list[str] = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("name"), str):
            names.append(item["name"])
    return names


__all__ = [
    "Envelope",
    "FieldData",
    "Record",
    "database_url",
    "decode_json",
    "extract_names",
    "get_response_field",
    "layout_url",
]
