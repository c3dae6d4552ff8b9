"""MCP tool: get_records.

Returns a page of records from a layout.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import build_tool_response, open_filemaker


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the get_records tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``config`` and ``connect``.

    """

    @app.tool(
        name="get_records",
        description=(
            "Return JSON with up to `limit` records of a FileMaker layout, starting at the 1-based `start` "
            "position. Uses the configured database and layout when none are given."
        ),
        annotations={
            "title": "Get layout records",
            "readOnlyHint": True,
        },
    )
    async def get_records(
        ctx: Context,
        start: int = 1,
        limit: int = 100,
        database: str | None = None,
        layout: str | None = None,
    ) -> dict[str, Any]:
        await ctx.info(f"Fetching {limit} FileMaker records from position {start}.")
        async with open_filemaker(deps, database=database, layout=layout) as fm:
            records = await fm.get_records(start, limit)
        return build_tool_response("records", records, count=len(records))


__all__ = ["register"]
