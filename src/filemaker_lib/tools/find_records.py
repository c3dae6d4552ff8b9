"""MCP tool: find_records.

Runs a FileMaker find with one or more find requests and optional sorting.
"""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import build_tool_response, open_filemaker


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the find_records tool on the provided app instance.

    Args:
        app: The FastMCP application instance to add the tool to.
        deps: Dependencies namespace with ``config`` and ``connect``.

    """

    @app.tool(
        name="find_records",
        description=(
            "Return JSON with the records matching a FileMaker find. `query` is a list of find requests, "
            "each mapping field names to match values; requests are OR-ed together. Results are sorted by "
            "the `sort` fields when given."
        ),
        annotations={
            "title": "Find records",
            "readOnlyHint": True,
        },
    )
    async def find_records(  # noqa: PLR0913 (tool parameters are the MCP schema)
        ctx: Context,
        query: list[dict[str, str]],
        sort: list[str] | None = None,
        ascending: bool = True,
        database: str | None = None,
        layout: str | None = None,
    ) -> dict[str, Any]:
        await ctx.info(f"Running FileMaker find with {len(query)} request(s).")
        async with open_filemaker(deps, database=database, layout=layout) as fm:
            records = await fm.search(query, sort or [], ascending)
        return build_tool_response("records", records, count=len(records))


__all__ = ["register"]
