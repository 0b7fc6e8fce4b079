"""
Lexically-aware scanning helpers for minified player JavaScript.

- cut_after_js(): carve the shortest balanced {...}, [...] or (...) prefix
  out of a source string, skipping brackets inside strings, block comments
  and regex literals.
- between(): return the text between two literal anchors.

Neither helper parses JavaScript. They only guarantee that the fragment
boundaries they report are syntactically balanced.
"""

_OPENING = "{[("
_CLOSING = "}])"
_QUOTES = "\"'`"
_WHITESPACE = " \t\n\r\f"


def between(haystack: str, left: str, right: str) -> str:
    """Return the text between the first `left` and the next `right` after it."""
    start = haystack.find(left)
    if start == -1:
        return ""
    start += len(left)

    end = haystack.find(right, start)
    if end == -1:
        return ""
    return haystack[start:end]


def _skip_literal(source: str, index: int, terminator: str) -> int | None:
    """Return the index of the unescaped `terminator` at or after `index`."""
    length = len(source)
    while index < length and source[index] != terminator:
        if source[index] == "\\":
            index += 1
        index += 1
    if index >= length:
        return None
    return index


def _opens_regex(last_significant: str | None) -> bool:
    # A slash after an identifier or number is a division operator
    if last_significant is None:
        return False
    return not (last_significant.isascii() and last_significant.isalnum())


def cut_after_js(source: str) -> str | None:
    """
    Return the shortest lexically balanced prefix of `source`.

    Returns None when `source` does not begin with an opening bracket, when
    the brackets never balance, or when a string, comment or regex literal
    runs off the end of the input.

        >>> cut_after_js('{"a": "}1", "b": 1}abcd')
        '{"a": "}1", "b": 1}'
    """
    if not source or source[0] not in _OPENING:
        return None

    length = len(source)
    index = 0
    nest = 0
    last_significant: str | None = None

    while nest > 0 or index == 0:
        if index >= length:
            return None

        char = source[index]
        if char in _OPENING:
            nest += 1
        elif char in _CLOSING:
            nest -= 1
        elif char in _QUOTES:
            end = _skip_literal(source, index + 1, char)
            if end is None:
                return None
            index = end
        elif char == "/" and source.startswith("*", index + 1):
            end = source.find("*/", index + 2)
            if end == -1:
                return None
            index = end + 2
            continue
        elif char == "/" and _opens_regex(last_significant):
            end = _skip_literal(source, index + 1, "/")
            if end is None:
                return None
            index = end
        elif char not in _WHITESPACE:
            last_significant = char
        index += 1

    return source[:index]
