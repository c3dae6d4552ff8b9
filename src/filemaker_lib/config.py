"""Configuration management for the FileMaker Data API client.

This module defines the ``FilemakerConfig`` model and helpers to load
configuration from environment variables. The base URL is not part of the
state of a client: every request resolves ``FM_URL`` through
``resolve_base_url``, so ``set_fm_url`` also affects existing handles.
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError

from .errors import FilemakerError

# Load variables from a local .env file for development convenience
load_dotenv()

logger = logging.getLogger("filemaker_lib.config")

FM_URL_ENV = "FM_URL"

_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


class FilemakerConfig(BaseModel):
    """Connection settings for a FileMaker Data API deployment."""

    username: str | None = None
    password: str | None = None
    database: str | None = None
    layout: str | None = None
    verify_ssl: bool = False
    timeout_ms: int = Field(default=30000, ge=1000, le=600000)

    @property
    def timeout_seconds(self) -> float:
        """Return the request timeout in seconds, as httpx expects it."""
        return self.timeout_ms / 1000

    @classmethod
    def from_env(cls) -> FilemakerConfig:
        """Build a configuration object from environment variables."""
        raw_config: dict[str, Any] = {
            "username": os.getenv("FM_USERNAME"),
            "password": os.getenv("FM_PASSWORD"),
            "database": os.getenv("FM_DATABASE"),
            "layout": os.getenv("FM_LAYOUT"),
        }
        # Unset optional values fall back to the model defaults
        if (verify_ssl := os.getenv("FM_VERIFY_SSL")) is not None:
            raw_config["verify_ssl"] = verify_ssl
        if (timeout_ms := os.getenv("FM_TIMEOUT_MS")) is not None:
            raw_config["timeout_ms"] = timeout_ms
        try:
            return cls(**raw_config)
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            msg = f"Invalid FileMaker configuration: {messages}"
            raise RuntimeError(msg) from exc


def resolve_base_url() -> str:
    """Return the Data API base URL from ``FM_URL`` without trailing slashes.

    The variable is read on every call and never cached.

    Raises:
        FilemakerError: If ``FM_URL`` is unset or blank.

    """
    base_url = os.getenv(FM_URL_ENV, "").strip()
    if not base_url:
        msg = f"{FM_URL_ENV} is required to reach the FileMaker Data API."
        raise FilemakerError(msg)
    return base_url.rstrip("/")


def set_fm_url(url: str) -> None:
    """Validate ``url`` and store it in ``FM_URL`` for subsequent calls.

    Args:
        url: Data API root, e.g. ``https://fm.example.com/fmi/data/vLatest``.

    Raises:
        FilemakerError: If the value is not an absolute http(s) URL.

    """
    candidate = url.strip()
    try:
        _URL_ADAPTER.validate_python(candidate)
    except ValidationError as exc:
        msg = f"Invalid FileMaker server url: {url!r}"
        raise FilemakerError(msg) from exc
    os.environ[FM_URL_ENV] = candidate.rstrip("/")
    logger.debug("FileMaker base url set to %s", os.environ[FM_URL_ENV])


def encode_parameter(parameter: str) -> str:
    """URL-encode a database or layout name for use as a path segment."""
    encoded = quote(parameter, safe="")
    logger.debug("Encoded parameter '%s' to '%s'", parameter, encoded)
    return encoded


__all__ = [
    "FM_URL_ENV",
    "FilemakerConfig",
    "encode_parameter",
    "resolve_base_url",
    "set_fm_url",
]
