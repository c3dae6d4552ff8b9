"""Entry point for the FileMaker MCP server.

This module wires together the FastMCP app and registers read-only tools
backed by the ``Filemaker`` client. Credentials and defaults come from the
``FM_*`` environment variables (see ``filemaker_lib.config``).

Registered tools:
- ``list_databases``: list the databases hosted on the server
- ``list_layouts``: list the layouts of a database
- ``get_records``: return a page of records from a layout
- ``count_records``: return the total record count of a layout
- ``find_records``: run a find with optional sorting
"""

import logging
import os
import signal
import sys
from types import SimpleNamespace

from fastmcp import FastMCP

from .client.filemaker import Filemaker
from .config import FilemakerConfig
from .operations.discovery import list_databases, list_layouts
from .tools.count_records import register as register_count_records
from .tools.find_records import register as register_find_records
from .tools.get_records import register as register_get_records
from .tools.list_databases import register as register_list_databases
from .tools.list_layouts import register as register_list_layouts

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(name)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("filemaker_lib.server")

app = FastMCP(
    name="filemaker-mcp",
    instructions="Expose tools that read databases, layouts, and records from a FileMaker Server.",
)


def build_deps(config: FilemakerConfig) -> SimpleNamespace:
    """Collect the callables the tools depend on."""
    return SimpleNamespace(
        config=config,
        connect=Filemaker.connect,
        list_databases=list_databases,
        list_layouts=list_layouts,
    )


def _register_capabilities(deps: SimpleNamespace) -> None:
    """Register every tool with the app instance."""
    register_list_databases(app, deps=deps)
    register_list_layouts(app, deps=deps)
    register_get_records(app, deps=deps)
    register_count_records(app, deps=deps)
    register_find_records(app, deps=deps)


def handle_interrupt(signum: int, frame: object) -> None:  # noqa: ARG001
    """Handle keyboard interrupt gracefully."""
    logger.info("Received interrupt signal, shutting down...")
    sys.exit(0)


def main() -> None:
    """Entry point for the filemaker-mcp console script."""
    signal.signal(signal.SIGINT, handle_interrupt)
    signal.signal(signal.SIGTERM, handle_interrupt)
    _register_capabilities(build_deps(FilemakerConfig.from_env()))
    app.run()


__all__ = ["app", "build_deps", "handle_interrupt", "main"]


if __name__ == "__main__":
    main()
