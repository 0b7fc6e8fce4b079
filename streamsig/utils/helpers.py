"""
General utility functions shared by the format transformers.
"""

import re
from typing import Any
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from ..exceptions import InvalidURL

_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


def traverse_obj(obj: Any, *paths: Any, default: Any = None) -> Any:
    """
    Traverse nested dicts/lists safely.
    Ported from yt-dlp's traverse_obj utility.

    Usage:
        traverse_obj(data, 'key1', 'key2', 'key3')
        traverse_obj(data, ('key1', 'key2'), ('alt_key1', 'alt_key2'))
    """
    for path in paths:
        if isinstance(path, (list, tuple)):
            result = obj
            for key in path:
                if result is None:
                    break
                if isinstance(result, dict):
                    result = result.get(key)
                elif isinstance(result, (list, tuple)):
                    try:
                        result = result[key]
                    except (IndexError, TypeError):
                        result = None
                else:
                    result = None
            if result is not None:
                return result
        else:
            if isinstance(obj, dict) and path in obj:
                return obj[path]
    return default


def int_or_none(v: Any, scale: int = 1) -> int | None:
    """Convert value to int or return None."""
    if v is None:
        return None
    try:
        return int(v) // scale
    except (ValueError, TypeError):
        return None


def leading_int(text: str | None) -> int:
    """Parse the leading integer of a label like '1080p60', or 0."""
    if not text:
        return 0
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def parse_query(query: str) -> dict[str, str]:
    """Decode a form-encoded query string; the first value of a repeated key wins."""
    result: dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        result.setdefault(key, value)
    return result


def parse_url(url: str) -> SplitResult:
    """Split an absolute URL, raising InvalidURL when it has no scheme or host."""
    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise InvalidURL(f"Invalid URL {url!r}: {e}", error_code="url.invalid") from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidURL(f"Invalid URL {url!r}", error_code="url.invalid")
    return parsed


def get_query_param(url: str, name: str) -> str | None:
    """Return the first value of query parameter `name`, or None."""
    parsed = parse_url(url)
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if key == name:
            return value
    return None


def set_query_param(url: str, name: str, value: str) -> str:
    """
    Return `url` with every `name` parameter set to `value`.

    Parameter order is preserved; `name` is appended when absent.
    """
    parsed = parse_url(url)
    pairs = parse_qsl(parsed.query, keep_blank_values=True)

    found = False
    updated = []
    for key, current in pairs:
        if key == name:
            updated.append((key, value))
            found = True
        else:
            updated.append((key, current))
    if not found:
        updated.append((name, value))

    return urlunsplit(parsed._replace(query=urlencode(updated)))
