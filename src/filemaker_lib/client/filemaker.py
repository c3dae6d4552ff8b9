"""Session-scoped FileMaker Data API client.

``Filemaker`` binds one database and layout to a bearer token acquired at
connect time and exposes record, search, and discovery operations on top of
the Data API.
"""

import logging
from collections.abc import Iterable, Mapping
from types import TracebackType
from typing import Any, Self

import httpx

from ..config import FilemakerConfig, encode_parameter
from ..errors import FilemakerError, envelope_error
from ..operations import discovery
from ..operations.common import (
    Envelope,
    Record,
    decode_json,
    get_response_field,
    layout_url,
)
from ..operations.records import (
    build_advanced_find_body,
    build_field_data_body,
    build_find_body,
    get_row_names_by_example,
    parse_record_id,
)
from .http import bearer_headers, build_http_client
from .session import SessionToken, close_session, request_session_token

logger = logging.getLogger("filemaker_lib.client")


class Filemaker:
    """A connection to one FileMaker database layout.

    Create instances with :meth:`connect`, which authenticates once. The
    token is reused for every call and is never refreshed; once the server
    expires it, further calls fail.
    """

    def __init__(
        self,
        database: str,
        table: str,
        *,
        token: SessionToken,
        http_client: httpx.AsyncClient,
    ) -> None:
        """Initialize a handle from an already acquired token.

        Args:
            database: Raw (unencoded) database name.
            table: Raw (unencoded) layout name.
            token: Holder of the session bearer token.
            http_client: HTTP client shared by every call on this handle.

        """
        self._raw_database = database
        self.database = encode_parameter(database)
        self.table = encode_parameter(table)
        self._token = token
        self._client = http_client

    @classmethod
    async def connect(
        cls,
        username: str,
        password: str,
        database: str,
        table: str,
        *,
        config: FilemakerConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Authenticate against ``database`` and return a ready handle.

        Args:
            username: FileMaker account name.
            password: FileMaker account password.
            database: Name of the database to connect to.
            table: Name of the layout to operate on.
            config: HTTP settings; defaults to ``FilemakerConfig.from_env()``.
            http_client: Optional pre-built client; one is created otherwise.

        Raises:
            FilemakerError: If authentication fails.

        """
        resolved = config or FilemakerConfig.from_env()
        client = http_client or build_http_client(resolved)
        try:
            token = await request_session_token(client, database, username, password)
        except FilemakerError:
            if http_client is None:
                await client.aclose()
            raise
        logger.info("Filemaker instance created successfully")
        return cls(database, table, token=SessionToken(token), http_client=client)

    async def __aenter__(self) -> Self:
        """Return the handle for async context manager usage."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the HTTP client when leaving an async context manager block."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Safe to call more than once."""
        await self._client.aclose()

    async def logout(self) -> None:
        """End the server-side session and forget the token.

        The token is kept when the server rejects the logout, so the handle
        stays usable and logout can be retried.
        """
        token = await self._token.peek()
        if token:
            await close_session(self._client, self._raw_database, token)
            await self._token.clear()

    async def authenticated_request(
        self,
        url: str,
        method: str,
        body: Any | None = None,
    ) -> Any:
        """Send a request carrying the session token and return the parsed JSON.

        Args:
            url: The endpoint URL.
            method: HTTP method, e.g. ``"GET"`` or ``"PATCH"``.
            body: Optional JSON-serialisable request body.

        Returns:
            The decoded response, typically the ``{"response", "messages"}``
            envelope. HTTP error statuses are not raised; FileMaker reports
            errors inside the envelope.

        Raises:
            FilemakerError: If no token is held, the request fails in transport,
                or the body is not valid JSON.

        """
        token = await self._token.get()
        if body is not None:
            logger.debug("Request body: %s", body)
        logger.debug("Sending authenticated %s request to URL: %s", method, url)
        try:
            response = await self._client.request(method, url, headers=bearer_headers(token), json=body)
        except httpx.HTTPError as exc:
            logger.error("Failed to send authenticated request: %s", exc)
            msg = f"Network error during {method} {url}: {exc}"
            raise FilemakerError(msg) from exc

        payload = decode_json(response, action=f"{method} {url}")
        logger.info("Authenticated request to %s completed successfully", url)
        return payload

    def _url(self, path: str) -> str:
        return layout_url(self.database, self.table, path)

    async def get_records(self, start: int, limit: int) -> list[Record]:
        """Retrieve up to ``limit`` records starting at the 1-based ``start``.

        Raises:
            FilemakerError: If the envelope has no ``response.data``.

        """
        url = self._url(f"records?_offset={start}&_limit={limit}")
        logger.debug("Fetching records from URL: %s", url)
        response = await self.authenticated_request(url, "GET")
        data = get_response_field(response, "data")
        if data is None:
            logger.error("Failed to retrieve records from response: %s", response)
            msg = "Failed to retrieve records"
            raise FilemakerError(msg)
        logger.info("Successfully retrieved records from database")
        return data if isinstance(data, list) else []

    async def get_all_records(self) -> list[Record]:
        """Retrieve every record by counting first and then fetching that many.

        The two requests are not atomic; concurrent writers can make the
        result under- or over-count.
        """
        total_count = await self.get_number_of_records()
        logger.debug("Total records to fetch: %s", total_count)
        return await self.get_records(1, total_count)

    async def get_number_of_records(self) -> int:
        """Return ``response.dataInfo.totalRecordCount`` for the layout."""
        url = self._url("records")
        logger.debug("Fetching total number of records from URL: %s", url)
        response = await self.authenticated_request(url, "GET")
        total_count = get_response_field(response, "dataInfo", "totalRecordCount")
        if isinstance(total_count, bool) or not isinstance(total_count, int) or total_count < 0:
            logger.error("Failed to retrieve total record count from response: %s", response)
            msg = "Failed to retrieve total record count"
            raise FilemakerError(msg)
        logger.info("Total record count retrieved successfully: %s", total_count)
        return total_count

    async def search(
        self,
        query: list[Mapping[str, str]],
        sort: Iterable[str],
        ascending: bool,
    ) -> list[Record]:
        """Find records matching any of the ``query`` requests.

        Args:
            query: Find requests, each a map of field name to match value.
            sort: Field names to sort by.
            ascending: Sort direction shared by all sort fields.

        Returns:
            The matching records.

        """
        url = self._url("_find")
        body = build_find_body(query, sort, ascending)
        logger.debug("Executing search query with URL: %s. Body: %s", url, body)
        response = await self.authenticated_request(url, "POST", body)
        data = get_response_field(response, "data")
        if data is None:
            logger.error("Failed to retrieve search results from response: %s", response)
            msg = "Failed to retrieve search results"
            raise FilemakerError(msg)
        logger.info("Search query executed successfully")
        return data if isinstance(data, list) else []

    async def advanced_search(
        self,
        fields: Mapping[str, Any],
        sort: Iterable[str],
        ascending: bool,
    ) -> list[Record]:
        """Find records matching any single ``field == value`` criterion.

        Each entry of ``fields`` becomes a separate find request; sorting is
        only sent when ``sort`` is non-empty.
        """
        url = self._url("_find")
        body = build_advanced_find_body(fields, sort, ascending)
        logger.debug("Sending advanced search to URL: %s with content: %s", url, body)
        response = await self.authenticated_request(url, "POST", body)
        data = get_response_field(response, "data")
        if not isinstance(data, list):
            logger.error("Failed to retrieve advanced search results: %s", response)
            msg = "Failed to retrieve advanced search results"
            raise FilemakerError(msg)
        logger.info("Advanced search completed successfully, retrieved %d records", len(data))
        return data

    async def add_record(self, field_data: Mapping[str, Any]) -> dict[str, Any]:
        """Create a record and return it as stored by the server.

        Returns:
            ``{"success": True, "result": <record>}`` when the server returns
            a record id, otherwise ``{"success": False, "result": <envelope>}``.

        """
        url = self._url("records")
        body = build_field_data_body(field_data)
        logger.debug("Adding a new record. URL: %s. Body: %s", url, body)
        response = await self.authenticated_request(url, "POST", body)

        raw_id = get_response_field(response, "recordId")
        if raw_id is None:
            logger.error("Failed to add the record: %s", response)
            return {"success": False, "result": response}
        record_id = parse_record_id(raw_id)
        if record_id is None:
            logger.error("Failed to parse record id %s - %s", raw_id, response)
            return {"success": False, "result": response}

        logger.debug("Record added successfully. Record ID: %s", record_id)
        added_record = await self.get_record_by_id(record_id)
        return {"success": True, "result": added_record}

    async def add_records(self, records: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
        """Add each record in turn and collect the :meth:`add_record` results."""
        results: list[dict[str, Any]] = []
        for index, field_data in enumerate(records, start=1):
            result = await self.add_record(field_data)
            if not result["success"]:
                logger.warning("Record %d was not added", index)
            results.append(result)
        return results

    async def update_record(self, record_id: int | str, field_data: Mapping[str, Any]) -> Envelope:
        """Edit the fields of ``record_id`` and return the raw envelope."""
        url = self._url(f"records/{record_id}")
        body = build_field_data_body(field_data)
        logger.debug("Updating record ID: %s. URL: %s. Body: %s", record_id, url, body)
        response = await self.authenticated_request(url, "PATCH", body)
        logger.info("Record ID: %s updated successfully", record_id)
        return response

    async def get_record_by_id(self, record_id: int | str) -> Record:
        """Fetch a single record.

        Raises:
            FilemakerError: If the envelope has no data or the data is empty.

        """
        url = self._url(f"records/{record_id}")
        logger.debug("Fetching record with ID: %s from URL: %s", record_id, url)
        response = await self.authenticated_request(url, "GET")
        data = get_response_field(response, "data")
        if data is None:
            logger.error("Failed to get record from response: %s", response)
            msg = "Failed to get record"
            raise FilemakerError(msg)
        if not isinstance(data, list) or not data:
            logger.error("No record found for ID %s", record_id)
            msg = "No record found"
            raise FilemakerError(msg)
        logger.info("Record ID %s retrieved successfully", record_id)
        return data[0]

    async def delete_record(self, record_id: int | str) -> dict[str, bool]:
        """Delete a record.

        Returns:
            ``{"success": True}``.

        Raises:
            FilemakerError: If the response is not an object or reports a
                FileMaker error code.

        """
        url = self._url(f"records/{record_id}")
        logger.debug("Deleting record with ID: %s at URL: %s", record_id, url)
        response = await self.authenticated_request(url, "DELETE")
        if not isinstance(response, dict):
            logger.error("Failed to delete record ID %s", record_id)
            msg = "Failed to delete record"
            raise FilemakerError(msg)
        if error := envelope_error(response):
            logger.error("Failed to delete record ID %s: %s", record_id, error)
            msg = f"Failed to delete record: {error}"
            raise FilemakerError(msg)
        logger.info("Record ID %s deleted successfully", record_id)
        return {"success": True}

    async def clear_database(self) -> None:
        """Delete every record of the layout, one request per record.

        Stops at the first failure; records deleted before it stay deleted.
        """
        logger.debug("Clearing all records from the database")
        number_of_records = await self.get_number_of_records()
        if number_of_records == 0:
            logger.warning("No records found in the database. Nothing to clear")
            return

        records = await self.get_records(1, number_of_records)
        for record in records:
            raw_id = record.get("recordId") if isinstance(record, dict) else None
            if raw_id is None:
                logger.error("Record ID not found in record: %s", record)
                msg = f"Record ID not found in record: {record}"
                raise FilemakerError(msg)
            record_id = parse_record_id(raw_id)
            if record_id is None:
                logger.error("Failed to parse record ID %s", raw_id)
                msg = f"Failed to parse record ID {raw_id!r}"
                raise FilemakerError(msg)
            logger.debug("Deleting record ID: %s", record_id)
            await self.delete_record(record_id)
        logger.info("All records cleared from the database")

    @staticmethod
    def get_row_names_by_example(record: Record) -> list[str]:
        """Return the non-global field names of ``record``."""
        return get_row_names_by_example(record)

    async def get_row_names(self) -> list[str]:
        """Return the field names of the first record, or ``[]`` when empty."""
        logger.debug("Attempting to fetch field names for the first record")
        records = await self.get_records(1, 1)
        if records:
            logger.info("Successfully fetched field names for the first record")
            return get_row_names_by_example(records[0])
        logger.warning("No records found while fetching field names")
        return []

    @staticmethod
    async def get_databases(
        username: str,
        password: str,
        *,
        config: FilemakerConfig | None = None,
    ) -> list[str]:
        """Return the database names visible to the given account."""
        return await discovery.list_databases(username, password, config=config)

    @staticmethod
    async def get_layouts(
        username: str,
        password: str,
        database: str,
        *,
        config: FilemakerConfig | None = None,
    ) -> list[str]:
        """Return the layout names of ``database``."""
        return await discovery.list_layouts(username, password, database, config=config)

    @staticmethod
    async def delete_database(
        database: str,
        username: str,
        password: str,
        *,
        config: FilemakerConfig | None = None,
    ) -> None:
        """Delete ``database`` on the server."""
        await discovery.remove_database(database, username, password, config=config)


__all__ = ["Filemaker"]
