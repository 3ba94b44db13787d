"""Coercion of loosely-typed model output into storable values.

Language models routinely emit ``"unknown"``, ``"N/A"``, ``"$1.2B"`` or
``NaN`` where a number or boolean is expected. These helpers turn such
values into a clean number/bool or None; they never raise.
"""

import math
import re
from typing import Any, Optional

_UNKNOWN_MARKERS = frozenset({"unknown", "n/a", "na", "none", "null", "-", ""})
_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "public", "listed"})
_FALSE_STRINGS = frozenset({"false", "no", "n", "0", "private"})
_NUMERIC_NOISE = re.compile(r"[\s,$€£₹_]")


def is_unknown(value: Any) -> bool:
    """True for None and for placeholder strings such as 'Unknown'."""
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in _UNKNOWN_MARKERS


def coerce_number(value: Any) -> Optional[float]:
    """Parse ``value`` as a finite float, or return None.

    Currency symbols, thousands separators and whitespace are ignored;
    any other suffix (e.g. "1.2B") makes the value unparsable. Booleans
    are rejected.
    """
    if is_unknown(value) or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = _NUMERIC_NOISE.sub("", value)
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def coerce_bool(value: Any) -> Optional[bool]:
    """Parse ``value`` as a boolean, or return None when it is not one."""
    if isinstance(value, bool):
        return value
    if is_unknown(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value in (0, 1):
            return bool(value)
        return None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def coerce_text(value: Any) -> Optional[str]:
    """Strip a string value; placeholders and non-strings become None.

    Plain numbers are accepted and rendered as text (models sometimes emit
    ``"employeeCount": 250``).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    if not isinstance(value, str) or is_unknown(value):
        return None
    return value.strip()
