"""
Tolerant scalar parsing shared by the normalizer, filter and form handling.

Nothing in this module raises on bad input: failure is always signalled by
returning None.
"""

import math
import re
import unicodedata
from datetime import date, datetime
from typing import Any, Optional, Tuple

# Leading numeric prefix, the way a lenient float parser reads "24.5 °C"
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_WHITESPACE = re.compile(r"\s+")


def parse_number(value: Any) -> Optional[float]:
    """
    Convert a value of unknown type to a float.

    None, empty strings, NaN and anything unparsable give None. Strings may use
    a decimal comma ("24,5" and "24.5" both give 24.5).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return None if math.isnan(number) else number

    text = str(value).strip()
    if not text:
        return None

    match = _NUMBER_PREFIX.match(text.replace(",", ".", 1))
    if not match:
        return None
    return float(match.group(1))


def date_portion(value: Any) -> Optional[str]:
    """Return the calendar-date part of a possibly timestamped value."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value).strip()
    if not text:
        return None
    return text.split("T")[0].strip()


def _leading_int(text: str) -> Optional[int]:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else None


def parse_date_parts(value: Any) -> Optional[Tuple[int, int, int]]:
    """
    Split a date value into (year, month, day), month being 1-based.

    Only the date portion is considered. Fewer than three dash-separated
    components, or a component without a leading integer, gives None.
    """
    text = date_portion(value)
    if not text:
        return None

    parts = text.split("-")
    if len(parts) < 3:
        return None

    year, month, day = (_leading_int(part) for part in parts[:3])
    if year is None or month is None or day is None:
        return None
    return year, month, day


def fold_key(key: Any) -> str:
    """Fold a raw field name for lookup: NFC, trimmed, lower-cased, single-spaced."""
    text = unicodedata.normalize("NFC", str(key))
    return _WHITESPACE.sub(" ", text.strip()).lower()
