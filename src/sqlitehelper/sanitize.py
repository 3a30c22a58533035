from __future__ import annotations

"""String-safety helpers applied to every identifier and literal embedded in SQL text."""

from datetime import date, datetime
from typing import Any, Optional

_COMMENT_MARKERS = ("--", "/*", "*/")
_PRESERVED_CONTROL = {"\r", "\n"}


def sanitize_string(value: Optional[str], *, preserve_newlines: bool = True) -> str:
    """Return ``value`` cleaned for inclusion in generated SQL.

    - characters below code point 32 are dropped; CR and LF survive unless
      ``preserve_newlines`` is false (the stricter variant used for catalog lookups)
    - ``--``, ``/*`` and ``*/`` are removed until none remain
    - single quotes are doubled

    Everything else, including non-ASCII text, is kept as is. ``None`` and the
    empty string both yield ``""``.
    """
    if not value:
        return ""

    if preserve_newlines:
        kept = [ch for ch in value if ord(ch) >= 32 or ch in _PRESERVED_CONTROL]
    else:
        kept = [ch for ch in value if ord(ch) >= 32]
    text = _strip_comment_markers("".join(kept))
    return text.replace("'", "''")


def _strip_comment_markers(text: str) -> str:
    # removing one marker can join the halves of another ("-/*-" -> "--")
    while True:
        before = text
        for marker in _COMMENT_MARKERS:
            while marker in text:
                text = text.replace(marker, "")
        if text == before:
            return text


def has_extended_characters(value: Optional[str]) -> bool:
    """True when ``value`` contains characters outside the 7-bit ASCII range."""
    if not value:
        return False
    return any(ord(ch) > 127 for ch in value)


def format_timestamp(value: date) -> str:
    """Render ``value`` as ``MM/dd/yyyy hh:mm:ss.fffffff tt``.

    Plain dates are treated as midnight. Seven fractional digits are emitted;
    Python keeps microseconds, so the last digit is always zero.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.month:02d}/{value.day:02d}/{value.year:04d} "
        f"{hour:02d}:{value.minute:02d}:{value.second:02d}.{value.microsecond * 10:07d} {meridiem}"
    )


def render_literal(value: Any, *, wide_prefix: str = "") -> str:
    """Render a Python value as a SQL literal.

    ``None`` becomes the bare keyword ``null``; dates and datetimes use
    :func:`format_timestamp`; anything else is converted with ``str``,
    sanitized and single-quoted. ``wide_prefix`` (``"N"`` for engines that
    understand national-character literals) is prepended when the text holds
    non-ASCII characters.
    """
    if value is None:
        return "null"
    if isinstance(value, date):
        return f"'{format_timestamp(value)}'"
    text = str(value)
    prefix = wide_prefix if has_extended_characters(text) else ""
    return f"{prefix}'{sanitize_string(text)}'"


__all__ = [
    "sanitize_string",
    "has_extended_characters",
    "format_timestamp",
    "render_literal",
]
