"""Helpers for safe debug logging.

Requests to the Metra API carry a Basic ``Authorization`` header built from
the account credentials, and a base URL may embed them as ``user:pass@host``.
Both are masked here before anything is emitted at DEBUG level.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "auth",
        "authorization",
        "cookie",
        "password",
        "proxy-authorization",
        "username",
    }
)

_URL_USERINFO_RE = re.compile(r"(?P<scheme>[a-z][a-z0-9+.-]*://)[^/@\s]+@", re.IGNORECASE)
_BASIC_TOKEN_RE = re.compile(r"\bBasic\s+[A-Za-z0-9+/=]+")


def _mask_string(text: str, max_string: int) -> str:
    text = _URL_USERINFO_RE.sub(rf"\g<scheme>{REDACTED}@", text)
    text = _BASIC_TOKEN_RE.sub(f"Basic {REDACTED}", text)
    if len(text) > max_string:
        return f"{text[:max_string]}...<truncated>"
    return text


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Values under credential-like keys are replaced outright. Strings have
    URL userinfo and Basic tokens masked. Sequences are cut to *max_items*
    entries since a shapes payload runs to tens of thousands of points.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return _mask_string(value, max_string)

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    def _child(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if str(key).lower() in _CREDENTIAL_KEYS else _child(item)
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        items = [_child(item) for item in list(value)[:max_items]]
        hidden = len(value) - max_items
        if hidden > 0:
            items.append(f"<{hidden} more>")
        return items

    return repr(value)
