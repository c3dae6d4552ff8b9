"""Request bodies and record helpers for layout record operations."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .common import FieldData, Record

logger = logging.getLogger("filemaker_lib.operations.records")

SORT_ASCEND = "ascend"
SORT_DESCEND = "descend"
# Fields named with this prefix are FileMaker globals, not per-record data
GLOBAL_FIELD_PREFIX = "g_"


def sort_order(ascending: bool) -> str:
    """Map the ascending flag to the Data API ``sortOrder`` keyword."""
    return SORT_ASCEND if ascending else SORT_DESCEND


def build_sort_spec(sort: Iterable[str], ascending: bool) -> list[dict[str, str]]:
    """Build the ``sort`` array for a find request.

    Every field shares the same order.

    Args:
        sort: Field names to sort by, in priority order.
        ascending: Sort ascending when true, descending otherwise.

    Returns:
        A list of ``{"fieldName": ..., "sortOrder": ...}`` objects.

    """
    order = sort_order(ascending)
    return [{"fieldName": field, "sortOrder": order} for field in sort]


def build_find_body(
    query: list[Mapping[str, str]],
    sort: Iterable[str],
    ascending: bool,
) -> dict[str, Any]:
    """Build a ``_find`` body from explicit find requests.

    The query list is passed through unchanged. ``sort`` is always present,
    even when empty.
    """
    return {
        "query": [dict(request) for request in query],
        "sort": build_sort_spec(sort, ascending),
    }


def build_advanced_find_body(
    fields: Mapping[str, Any],
    sort: Iterable[str],
    ascending: bool,
) -> dict[str, Any]:
    """Build a ``_find`` body where each field criterion is its own request.

    FileMaker ORs separate find requests together, so ``{"a": 1, "b": 2}``
    matches records where ``a`` is 1 or ``b`` is 2. ``sort`` is omitted when
    no sort fields are given.
    """
    body: dict[str, Any] = {"query": [{field: value} for field, value in fields.items()]}
    sort_spec = build_sort_spec(sort, ascending)
    if sort_spec:
        body["sort"] = sort_spec
    return body


def build_field_data_body(field_data: Mapping[str, Any]) -> dict[str, FieldData]:
    """Wrap field values in the ``fieldData`` object used by create and edit."""
    return {"fieldData": dict(field_data)}


def parse_record_id(value: Any) -> int | None:
    """Parse a FileMaker ``recordId`` into an integer.

    Record ids arrive as strings. Anything that is not a non-negative integer
    yields ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def get_row_names_by_example(record: Record) -> list[str]:
    """Return the field names of ``record``, excluding global fields.

    Args:
        record: A record object as returned by the Data API.

    Returns:
        Keys of ``record["fieldData"]`` that do not start with ``g_``, in
        their original order. Empty when ``record`` is not an object or has
        no ``fieldData``.

    """
    if not isinstance(record, dict):
        return []
    field_data = record.get("fieldData")
    if not isinstance(field_data, dict):
        return []
    fields = [name for name in field_data if not name.startswith(GLOBAL_FIELD_PREFIX)]
    logger.info("Extracted row names: %s", fields)
    return fields


__all__ = [
    "GLOBAL_FIELD_PREFIX",
    "SORT_ASCEND",
    "SORT_DESCEND",
    "build_advanced_find_body",
    "build_field_data_body",
    "build_find_body",
    "build_sort_spec",
    "get_row_names_by_example",
    "parse_record_id",
    "sort_order",
]
