"""Unit tests for database and layout discovery helpers and HTTP client setup."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from filemaker_lib.client.http import bearer_headers, build_http_client, open_http_client
from filemaker_lib.config import FilemakerConfig
from filemaker_lib.errors import FilemakerError
from filemaker_lib.operations.discovery import list_databases, list_layouts, remove_database

BASE_URL = "https://fm.example.com/fmi/data/vLatest"


@pytest.fixture(autouse=True)
def fm_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point FM_URL at a test server."""
    monkeypatch.setenv("FM_URL", BASE_URL)


@pytest.fixture
def config() -> FilemakerConfig:
    """Provide explicit HTTP settings."""
    return FilemakerConfig(verify_ssl=False, timeout_ms=5000)


@pytest.fixture
def mock_http() -> Any:
    """Patch httpx.AsyncClient used by open_http_client and yield the inner client."""
    # Build the spec'd mock before the class itself is patched
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    with patch("filemaker_lib.client.http.httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value.__aenter__.return_value = mock_client
        mock_client.client_class = mock_client_class
        yield mock_client


def _response(payload: Any) -> MagicMock:
    """Build an httpx-like response returning ``payload`` from json()."""
    response = MagicMock(spec=httpx.Response)
    response.json.return_value = payload
    return response


class TestHttpClient:
    """Tests for HTTP client construction."""

    @pytest.mark.asyncio
    async def test_build_http_client_applies_timeout(self) -> None:
        """The configured timeout should be applied in seconds."""
        client = build_http_client(FilemakerConfig(timeout_ms=2000))
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout == httpx.Timeout(2.0)
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_open_http_client_skips_tls_verification_by_default(self, mock_http: Any) -> None:
        """Static calls should build their client with verify=False unless configured."""
        mock_http.get.return_value = _response({"response": {"databases": []}})

        await list_databases("user", "pass", config=FilemakerConfig())

        kwargs = mock_http.client_class.call_args.kwargs
        assert kwargs["verify"] is False
        assert kwargs["timeout"] == httpx.Timeout(30.0)

    @pytest.mark.asyncio
    async def test_open_http_client_uses_factory_and_closes(self) -> None:
        """The short-lived client should come from build_http_client and be closed on exit."""
        config = FilemakerConfig(timeout_ms=2000)
        with patch("filemaker_lib.client.http.build_http_client", wraps=build_http_client) as factory:
            async with open_http_client(config) as client:
                assert client.timeout == httpx.Timeout(2.0)
                assert not client.is_closed

        factory.assert_called_once_with(config)
        assert client.is_closed

    def test_bearer_headers(self) -> None:
        """Bearer headers should include the JSON content type."""
        assert bearer_headers("t") == {"Authorization": "Bearer t", "Content-Type": "application/json"}


class TestListDatabases:
    """Tests for database listing."""

    @pytest.mark.asyncio
    async def test_success_uses_basic_auth(self, mock_http: Any, config: FilemakerConfig) -> None:
        """Database names should be returned and Basic auth used directly."""
        mock_http.get.return_value = _response(
            {"response": {"databases": [{"name": "Contacts"}, {"name": "Invoices"}, {}]}, "messages": []},
        )

        names = await list_databases("user", "pass", config=config)

        assert names == ["Contacts", "Invoices"]
        call = mock_http.get.await_args
        assert call.args[0] == f"{BASE_URL}/databases"
        assert call.kwargs["auth"] == ("user", "pass")
        mock_http.post.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_databases_raises(self, mock_http: Any, config: FilemakerConfig) -> None:
        """An envelope without a databases list should raise."""
        mock_http.get.return_value = _response({"response": {}, "messages": [{"code": "212"}]})

        with pytest.raises(FilemakerError, match="Failed to retrieve databases"):
            await list_databases("user", "bad", config=config)

    @pytest.mark.asyncio
    async def test_network_error_raises(self, mock_http: Any, config: FilemakerConfig) -> None:
        """Transport failures should surface as FilemakerError."""
        mock_http.get.side_effect = httpx.ConnectError("refused")

        with pytest.raises(FilemakerError, match="Network error while listing databases"):
            await list_databases("user", "pass", config=config)

    @pytest.mark.asyncio
    async def test_missing_fm_url_raises(self, monkeypatch: pytest.MonkeyPatch, config: FilemakerConfig) -> None:
        """Without FM_URL no request can be built."""
        monkeypatch.delenv("FM_URL")

        with pytest.raises(FilemakerError, match="FM_URL is required"):
            await list_databases("user", "pass", config=config)


class TestListLayouts:
    """Tests for layout listing."""

    @pytest.mark.asyncio
    async def test_success_authenticates_first(self, mock_http: Any, config: FilemakerConfig) -> None:
        """A session token should be acquired and sent as a bearer header."""
        mock_http.post.return_value = _response({"response": {"token": "tok"}})
        mock_http.get.return_value = _response(
            {"response": {"layouts": [{"name": "People"}, {"name": "Orders"}]}, "messages": []},
        )

        names = await list_layouts("user", "pass", "My DB", config=config)

        assert names == ["People", "Orders"]
        assert mock_http.post.await_args.args[0] == f"{BASE_URL}/databases/My%20DB/sessions"
        call = mock_http.get.await_args
        assert call.args[0] == f"{BASE_URL}/databases/My%20DB/layouts"
        assert call.kwargs["headers"]["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_auth_failure_skips_listing(self, mock_http: Any, config: FilemakerConfig) -> None:
        """If login fails the layouts endpoint should not be called."""
        mock_http.post.return_value = _response({"response": {}, "messages": [{"code": "212"}]})

        with pytest.raises(FilemakerError, match="Failed to get token"):
            await list_layouts("user", "bad", "DB", config=config)

        mock_http.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_layouts_raises(self, mock_http: Any, config: FilemakerConfig) -> None:
        """An envelope without a layouts list should raise."""
        mock_http.post.return_value = _response({"response": {"token": "tok"}})
        mock_http.get.return_value = _response({"response": {}, "messages": [{"code": "105"}]})

        with pytest.raises(FilemakerError, match="Failed to retrieve layouts"):
            await list_layouts("user", "pass", "DB", config=config)


class TestRemoveDatabase:
    """Tests for database deletion."""

    @pytest.mark.asyncio
    async def test_deletes_with_fresh_token(self, mock_http: Any, config: FilemakerConfig) -> None:
        """The database URL should be deleted with a bearer token."""
        mock_http.post.return_value = _response({"response": {"token": "tok"}})
        mock_http.delete.return_value = _response({"response": {}, "messages": [{"code": "0"}]})

        await remove_database("My DB", "user", "pass", config=config)

        call = mock_http.delete.await_args
        assert call.args[0] == f"{BASE_URL}/databases/My%20DB"
        assert call.kwargs["headers"]["Authorization"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_delete_failure_raises(self, mock_http: Any, config: FilemakerConfig) -> None:
        """HTTP errors from the delete call should raise FilemakerError."""
        mock_http.post.return_value = _response({"response": {"token": "tok"}})
        mock_http.delete.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(FilemakerError, match="Failed to delete database 'DB'"):
            await remove_database("DB", "user", "pass", config=config)
