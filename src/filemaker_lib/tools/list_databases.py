"""MCP tool: list_databases.

Lists the databases hosted on the configured FileMaker Server.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import build_tool_response, require_credentials


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the list_databases tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``config`` and ``list_databases``.

    """

    @app.tool(
        name="list_databases",
        description="Return JSON listing the databases hosted on the configured FileMaker Server.",
        annotations={
            "title": "List databases",
            "readOnlyHint": True,
        },
    )
    async def list_databases(ctx: Context) -> dict[str, Any]:
        await ctx.info("Listing FileMaker databases.")
        username, password = require_credentials(deps.config)
        databases = await deps.list_databases(username, password, config=deps.config)
        return build_tool_response("databases", databases)


__all__ = ["register"]
