"""
Built-in filters for template expressions.

Filters transform a resolved value using the pipe syntax
``{{value | filter: arg}}``. The catalog is closed: unknown names pass the
value through unchanged and log a warning.
"""

import html
import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from dateutil import parser as date_parser

from ..tree import detach

logger = logging.getLogger(__name__)

# Epoch values above this are milliseconds, below it seconds.
EPOCH_MILLIS_THRESHOLD = 10_000_000_000

DEFAULT_DATE_FORMAT = "%b %d, %Y"

# Fields missing from a partial date string ("10:30", "March 5") come from here.
DATE_PARSE_DEFAULT = datetime(1970, 1, 1)

DATE_TOKEN_PATTERN = re.compile(r'%[YmdHIMSpbBaAZ]')


def is_truthy(value: Any) -> bool:
    """
    Decide whether a JSON value counts as true for control flow.

    Falsy: None, false, 0, "", empty array, empty object.
    Everything else is truthy, including the strings "false" and "0".
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return True


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finite(item) for item in value]
    return value


def to_json(value: Any, indent: Optional[int] = None) -> str:
    """
    Serialize a value to JSON text, compact unless an indent is given.

    Non-finite floats have no JSON form and are written as null.
    """
    separators = None if indent else (",", ":")
    try:
        return json.dumps(value, separators=separators, indent=indent,
                          ensure_ascii=False, allow_nan=False)
    except ValueError:
        return json.dumps(_finite(value), separators=separators, indent=indent,
                          ensure_ascii=False, allow_nan=False)


def stringify(value: Any) -> str:
    """Convert a value to its interpolation text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return to_json(value)


def strftime_tokens(dt: datetime, fmt: str) -> str:
    """
    Format a datetime, substituting only the supported strftime tokens.

    Supported: %Y %m %d %H %I %M %S %p %b %B %a %A %Z. Any other ``%x``
    sequence is kept as literal text.

    Examples:
        >>> strftime_tokens(datetime(2025, 1, 15), '%b %d, %Y')
        'Jan 15, 2025'
        >>> strftime_tokens(datetime(2025, 1, 15), '%Y %q')
        '2025 %q'
    """
    def replace_token(match: re.Match) -> str:
        return dt.strftime(match.group(0))

    return DATE_TOKEN_PATTERN.sub(replace_token, fmt)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _from_epoch(epoch: float) -> datetime:
    if epoch > EPOCH_MILLIS_THRESHOLD:
        epoch = epoch / 1000
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc)


class TemplateFilters:
    """Implements the filter catalog for template expressions."""

    @staticmethod
    def default(value: Any, arg: Optional[str]) -> Any:
        """Return the input when truthy, else the argument (or None)."""
        if is_truthy(value):
            return value
        return arg

    @staticmethod
    def size(value: Any, arg: Optional[str] = None) -> int:
        """Length of an array, string or object; 0 for anything else."""
        if isinstance(value, (list, str, dict)):
            return len(value)
        return 0

    @staticmethod
    def truncate(value: Any, arg: Optional[str]) -> Any:
        """Cut a string to ``arg`` characters and append '...' if it was longer."""
        if not isinstance(value, str):
            return value
        try:
            max_len = int(arg)
        except (TypeError, ValueError):
            return value
        if max_len <= 0 or len(value) <= max_len:
            return value
        return value[:max_len] + "..."

    @staticmethod
    def escape(value: Any, arg: Optional[str] = None) -> Any:
        if isinstance(value, str):
            return html.escape(value, quote=True).replace("&#x27;", "&#39;")
        return value

    @staticmethod
    def upcase(value: Any, arg: Optional[str] = None) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @staticmethod
    def downcase(value: Any, arg: Optional[str] = None) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @staticmethod
    def json(value: Any, arg: Optional[str] = None) -> str:
        return to_json(value)

    @staticmethod
    def negate(value: Any, arg: Optional[str] = None) -> bool:
        return not is_truthy(value)

    @staticmethod
    def if_true(value: Any, arg: Optional[str]) -> Any:
        """
        Return the argument when the input is truthy, else the input itself.

        Chained with ``default`` (``{{x | if_true: on | default: off}}``) the
        falsy input reaches ``default`` untouched, which then supplies its
        fallback.
        """
        if is_truthy(value) and arg is not None:
            return arg.strip()
        return value

    @staticmethod
    def duration(value: Any, arg: Optional[str] = None) -> Any:
        """
        Format a millisecond duration as HH:MM:SS.

        Examples:
            >>> TemplateFilters.duration(3723000)
            '01:02:03'
        """
        if not _is_number(value):
            return value
        try:
            total_seconds = math.trunc(value) // 1000
        except (OverflowError, ValueError):
            return value
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    @staticmethod
    def first(value: Any, arg: Optional[str] = None) -> Any:
        if isinstance(value, list) and value:
            return detach(value[0])
        return None

    @staticmethod
    def last(value: Any, arg: Optional[str] = None) -> Any:
        if isinstance(value, list) and value:
            return detach(value[-1])
        return None

    @staticmethod
    def join(value: Any, arg: Optional[str]) -> Any:
        if not isinstance(value, list):
            return value
        separator = arg if arg is not None else ", "
        return separator.join(stringify(item) for item in value)

    @staticmethod
    def append(value: Any, arg: Optional[str]) -> Any:
        if value is None:
            return arg
        return stringify(value) + (arg or "")

    @staticmethod
    def prepend(value: Any, arg: Optional[str]) -> Any:
        if value is None:
            return arg
        return (arg or "") + stringify(value)

    @staticmethod
    def date(value: Any, arg: Optional[str]) -> Any:
        """
        Format an epoch number or a date string.

        Numbers above 10,000,000,000 are epoch milliseconds, smaller ones
        epoch seconds; epoch values render in UTC. Other strings are parsed
        with dateutil, taking missing fields from 1970-01-01. Unparseable
        input is returned unchanged.

        Examples:
            >>> TemplateFilters.date(1700000000, '%Y-%m-%d')
            '2023-11-14'
            >>> TemplateFilters.date('2025-12-01T09:30:00', '%b %d %H:%M')
            'Dec 01 09:30'
        """
        fmt = (arg or DEFAULT_DATE_FORMAT).strip('" ')
        try:
            if _is_number(value):
                dt = _from_epoch(value)
            elif isinstance(value, str) and value.strip():
                text = value.strip()
                if text.isdigit():
                    dt = _from_epoch(int(text))
                else:
                    dt = date_parser.parse(text, default=DATE_PARSE_DEFAULT)
            else:
                return value
        except (ValueError, OverflowError, OSError) as e:
            logger.debug("date filter could not parse %r: %s", value, e)
            return value

        return strftime_tokens(dt, fmt)

    @classmethod
    def apply(cls, name: str, value: Any, arg: Optional[str] = None) -> Any:
        """
        Apply a named filter to a value.

        Unknown filters pass the value through unchanged with a warning.
        """
        func = FILTERS.get(name)
        if func is None:
            logger.warning("Unknown template filter: %s", name)
            return value
        return func(value, arg)


FILTERS: Dict[str, Callable[[Any, Optional[str]], Any]] = {
    "default": TemplateFilters.default,
    "size": TemplateFilters.size,
    "truncate": TemplateFilters.truncate,
    "escape": TemplateFilters.escape,
    "upcase": TemplateFilters.upcase,
    "downcase": TemplateFilters.downcase,
    "json": TemplateFilters.json,
    "not": TemplateFilters.negate,
    "negate": TemplateFilters.negate,
    "if_true": TemplateFilters.if_true,
    "duration": TemplateFilters.duration,
    "first": TemplateFilters.first,
    "last": TemplateFilters.last,
    "join": TemplateFilters.join,
    "append": TemplateFilters.append,
    "prepend": TemplateFilters.prepend,
    "date": TemplateFilters.date,
}
