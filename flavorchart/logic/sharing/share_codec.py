"""URL-safe share tokens.

A token is the unpadded URL-safe base64 of the compact UTF-8 JSON of a payload,
so it only ever contains letters, digits, '-' and '_'.
"""
from __future__ import annotations
import base64
import binascii
import json
import re
from typing import Any, Optional, Tuple

__all__ = [
    "ShareTokenError", "ShareTokenCharactersError", "ShareTokenDecodeError",
    "ShareTokenParseError", "encode", "decode", "try_decode",
]

TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


class ShareTokenError(ValueError):
    """Base class for share tokens that cannot be turned back into a payload."""
    kind = "invalid"
    message = "Share link is invalid."

    def __init__(self, detail: str = ""):
        super().__init__(self.message if not detail else f"{self.message} ({detail})")
        self.detail = detail


class ShareTokenCharactersError(ShareTokenError):
    kind = "bad_characters"
    message = "Share link contains invalid characters."


class ShareTokenDecodeError(ShareTokenError):
    kind = "decode"
    message = "Share link could not be decoded."


class ShareTokenParseError(ShareTokenError):
    kind = "parse"
    message = "Share link could not be parsed."


def encode(payload: Any) -> str:
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode(token: Any) -> Any:
    """Inverse of encode(); raises a ShareTokenError subclass on bad input."""
    if not isinstance(token, str) or not TOKEN_PATTERN.fullmatch(token):
        raise ShareTokenCharactersError()
    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
        text = raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise ShareTokenDecodeError(str(e)) from e
    try:
        return json.loads(text)
    except ValueError as e:
        raise ShareTokenParseError(str(e)) from e


def try_decode(token: Any) -> Tuple[Optional[Any], Optional[str]]:
    """Decode without raising: returns (payload, None) or (None, user-facing message)."""
    try:
        return decode(token), None
    except ShareTokenError as e:
        return None, e.message
