"""Unit tests for configuration loading and URL helpers."""

import os

import pytest
from pydantic import ValidationError

from filemaker_lib.config import (
    FilemakerConfig,
    encode_parameter,
    resolve_base_url,
    set_fm_url,
)
from filemaker_lib.errors import FilemakerError

_FM_VARS = (
    "FM_URL",
    "FM_USERNAME",
    "FM_PASSWORD",
    "FM_DATABASE",
    "FM_LAYOUT",
    "FM_VERIFY_SSL",
    "FM_TIMEOUT_MS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every FM_* variable so tests start from defaults."""
    for name in _FM_VARS:
        # setenv first so teardown also undoes values written by set_fm_url
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestFilemakerConfig:
    """Tests for FilemakerConfig validation and loading."""

    def test_from_env_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        """Unset variables should fall back to the model defaults."""
        config = FilemakerConfig.from_env()
        assert config.username is None
        assert config.verify_ssl is False
        assert config.timeout_ms == 30000

    def test_base_url_is_not_a_model_field(self, clean_env: pytest.MonkeyPatch) -> None:
        """The base URL only ever comes from FM_URL at call time."""
        clean_env.setenv("FM_URL", "https://fm.example.com/fmi/data/vLatest")
        config = FilemakerConfig.from_env()
        assert "url" not in FilemakerConfig.model_fields
        assert "fm.example.com" not in config.model_dump_json()

    def test_from_env_reads_values(self, clean_env: pytest.MonkeyPatch) -> None:
        """All FM_* variables should be mapped onto the model."""
        clean_env.setenv("FM_USERNAME", "admin")
        clean_env.setenv("FM_PASSWORD", "secret")
        clean_env.setenv("FM_DATABASE", "Contacts DB")
        clean_env.setenv("FM_LAYOUT", "People")
        clean_env.setenv("FM_VERIFY_SSL", "true")
        clean_env.setenv("FM_TIMEOUT_MS", "15000")

        config = FilemakerConfig.from_env()

        assert config.username == "admin"
        assert config.password == "secret"
        assert config.database == "Contacts DB"
        assert config.layout == "People"
        assert config.verify_ssl is True
        assert config.timeout_ms == 15000

    def test_from_env_invalid_timeout(self, clean_env: pytest.MonkeyPatch) -> None:
        """Out-of-range timeouts should be reported as a configuration error."""
        clean_env.setenv("FM_TIMEOUT_MS", "500")
        with pytest.raises(RuntimeError, match="Invalid FileMaker configuration"):
            FilemakerConfig.from_env()

    def test_direct_instantiation_rejects_large_timeout(self) -> None:
        """Direct instantiation should surface pydantic validation errors."""
        with pytest.raises(ValidationError):
            FilemakerConfig(timeout_ms=700000)

    def test_timeout_seconds(self) -> None:
        """Milliseconds should convert to seconds for httpx."""
        assert FilemakerConfig(timeout_ms=2500).timeout_seconds == 2.5


class TestBaseUrl:
    """Tests for FM_URL resolution."""

    def test_resolve_strips_trailing_slash(self, clean_env: pytest.MonkeyPatch) -> None:
        """Trailing slashes should be removed to avoid double slashes in URLs."""
        clean_env.setenv("FM_URL", "https://fm.example.com/fmi/data/vLatest/")
        assert resolve_base_url() == "https://fm.example.com/fmi/data/vLatest"

    def test_resolve_reads_environment_each_call(self, clean_env: pytest.MonkeyPatch) -> None:
        """Changing FM_URL between calls should change the resolved URL."""
        clean_env.setenv("FM_URL", "https://one.example.com")
        assert resolve_base_url() == "https://one.example.com"
        clean_env.setenv("FM_URL", "https://two.example.com")
        assert resolve_base_url() == "https://two.example.com"

    def test_resolve_missing_raises(self, clean_env: pytest.MonkeyPatch) -> None:
        """An unset FM_URL should raise FilemakerError."""
        with pytest.raises(FilemakerError, match="FM_URL is required"):
            resolve_base_url()

    def test_set_fm_url_updates_environment(self, clean_env: pytest.MonkeyPatch) -> None:
        """set_fm_url should store the normalized URL for later calls."""
        set_fm_url("https://fm.example.com/fmi/data/vLatest/")
        assert os.environ["FM_URL"] == "https://fm.example.com/fmi/data/vLatest"
        assert resolve_base_url() == "https://fm.example.com/fmi/data/vLatest"

    @pytest.mark.parametrize("value", ["fm.example.com", "ftp://fm.example.com", "   "])
    def test_set_fm_url_rejects_invalid(self, clean_env: pytest.MonkeyPatch, value: str) -> None:
        """Values that are not absolute http(s) URLs should be rejected."""
        with pytest.raises(FilemakerError, match="Invalid FileMaker server url"):
            set_fm_url(value)
        assert "FM_URL" not in os.environ


class TestEncodeParameter:
    """Tests for path segment encoding."""

    def test_spaces_are_encoded(self) -> None:
        """Spaces should become %20."""
        assert encode_parameter("My Database") == "My%20Database"

    def test_slashes_are_encoded(self) -> None:
        """Slashes must not split the path."""
        assert encode_parameter("Sales/2024") == "Sales%2F2024"

    def test_plain_names_unchanged(self) -> None:
        """Names without reserved characters should pass through."""
        assert encode_parameter("Contacts") == "Contacts"
