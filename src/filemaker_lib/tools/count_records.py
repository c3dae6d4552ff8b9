"""MCP tool: count_records."""

# pyright: reportUnusedFunction=false

from types import SimpleNamespace
from typing import Any

from fastmcp import Context, FastMCP

from .common import build_tool_response, open_filemaker


def register(app: FastMCP, *, deps: SimpleNamespace) -> None:
    """Register the count_records tool on the provided app instance."""

    @app.tool(
        name="count_records",
        description="Return the total number of records in a FileMaker layout.",
        annotations={
            "title": "Count layout records",
            "readOnlyHint": True,
        },
    )
    async def count_records(
        ctx: Context,
        database: str | None = None,
        layout: str | None = None,
    ) -> dict[str, Any]:
        await ctx.info("Counting FileMaker records.")
        async with open_filemaker(deps, database=database, layout=layout) as fm:
            total = await fm.get_number_of_records()
        return build_tool_response("total_record_count", total)


__all__ = ["register"]
