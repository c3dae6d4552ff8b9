"""Async client for the FileMaker Data API.

Exposes the session-scoped ``Filemaker`` handle together with its
configuration and error types. The MCP server in ``filemaker_lib.server`` is
not imported here so that library users do not pull in FastMCP or configure
logging at import time.
"""

from .client.filemaker import Filemaker
from .config import FilemakerConfig, set_fm_url
from .errors import FilemakerError

__all__ = ["Filemaker", "FilemakerConfig", "FilemakerError", "set_fm_url"]
