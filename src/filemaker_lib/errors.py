"""Error type and envelope helpers for the FileMaker Data API client."""

from typing import Any

# FileMaker reports success as message code "0"
FM_OK_CODE = "0"


class FilemakerError(RuntimeError):
    """Raised for any failure talking to the FileMaker Data API.

    Transport errors, undecodable responses, and envelopes missing an expected
    field all surface as this single type. The underlying exception, when
    there is one, is chained as ``__cause__``.
    """


def first_message(payload: Any) -> dict[str, Any] | None:
    """Return the first entry of the envelope's ``messages`` list, if any."""
    if not isinstance(payload, dict):
        return None
    messages = payload.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], dict):
        return messages[0]
    return None


def envelope_error(payload: Any) -> str | None:
    """Describe the FileMaker error reported by an envelope.

    Returns:
        ``"<code>: <message>"`` when the first message carries a non-zero
        code, otherwise ``None``.

    """
    message = first_message(payload)
    if message is None:
        return None
    code = str(message.get("code", FM_OK_CODE))
    if code == FM_OK_CODE:
        return None
    return f"{code}: {message.get('message', '')}"


__all__ = ["FM_OK_CODE", "FilemakerError", "envelope_error", "first_message"]
