"""Common utilities for MCP tool registration.

Provides credential resolution, handle lifecycle, and response shaping shared
by the FileMaker tools.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any

from ..client.filemaker import Filemaker
from ..config import FilemakerConfig, resolve_base_url
from ..errors import FilemakerError

logger = logging.getLogger("filemaker_lib.tools.common")


def require_credentials(config: FilemakerConfig) -> tuple[str, str]:
    """Return the configured username and password.

    Raises:
        RuntimeError: If either value is missing.

    """
    if not (config.username and config.password):
        msg = "FM_USERNAME and FM_PASSWORD must be set to reach the FileMaker Data API."
        raise RuntimeError(msg)
    return config.username, config.password


def resolve_database(config: FilemakerConfig, database: str | None) -> str:
    """Return ``database`` or fall back to ``FM_DATABASE``."""
    resolved = database or config.database
    if not resolved:
        msg = "No database given and FM_DATABASE is not set."
        raise RuntimeError(msg)
    return resolved


def resolve_layout(config: FilemakerConfig, layout: str | None) -> str:
    """Return ``layout`` or fall back to ``FM_LAYOUT``."""
    resolved = layout or config.layout
    if not resolved:
        msg = "No layout given and FM_LAYOUT is not set."
        raise RuntimeError(msg)
    return resolved


@asynccontextmanager
async def open_filemaker(
    deps: SimpleNamespace,
    *,
    database: str | None = None,
    layout: str | None = None,
) -> AsyncIterator[Filemaker]:
    """Connect a handle for one tool call, then log out and close it.

    Args:
        deps: Dependencies namespace with ``config`` and ``connect``.
        database: Database override; defaults to ``FM_DATABASE``.
        layout: Layout override; defaults to ``FM_LAYOUT``.

    Yields:
        A connected ``Filemaker`` handle.

    """
    config: FilemakerConfig = deps.config
    username, password = require_credentials(config)
    handle: Filemaker = await deps.connect(
        username,
        password,
        resolve_database(config, database),
        resolve_layout(config, layout),
        config=config,
    )
    try:
        yield handle
    finally:
        try:
            await handle.logout()
        except FilemakerError as exc:
            # The tool result is still valid; the session expires server-side
            logger.warning("Failed to log out of FileMaker session: %s", exc)
        await handle.close()


def build_tool_response(section_name: str, data: Any, **extra: Any) -> dict[str, Any]:
    """Build a standard tool response with metadata.

    Args:
        section_name: Name of the data section (e.g., "records", "layouts").
        data: Collected data to include in the response.
        **extra: Additional top-level keys such as the database name.

    Returns:
        Standard response dictionary with metadata.

    """
    return {
        "retrieved_at": datetime.now(UTC).isoformat(),
        "base_url": resolve_base_url(),
        **extra,
        section_name: data,
    }


__all__ = [
    "build_tool_response",
    "open_filemaker",
    "require_credentials",
    "resolve_database",
    "resolve_layout",
]
