"""MCP tool: list_layouts.

Lists the top-level layouts of a database, defaulting to ``FM_DATABASE``.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import build_tool_response, require_credentials, resolve_database


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the list_layouts tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``config`` and ``list_layouts``.

    """

    @app.tool(
        name="list_layouts",
        description=(
            "Return JSON listing the layouts of a FileMaker database. "
            "Uses the configured database when none is given."
        ),
        annotations={
            "title": "List layouts",
            "readOnlyHint": True,
        },
    )
    async def list_layouts(ctx: Context, database: str | None = None) -> dict[str, Any]:
        resolved = resolve_database(deps.config, database)
        await ctx.info(f"Listing layouts of FileMaker database '{resolved}'.")
        username, password = require_credentials(deps.config)
        layouts = await deps.list_layouts(username, password, resolved, config=deps.config)
        return build_tool_response("layouts", layouts, database=resolved)


__all__ = ["register"]
