"""
Input validation and lenient query-string parsing utilities.

The ``parse_*`` helpers never raise: a malformed value comes back as ``None``
(or is dropped from a list) so that callers can treat it as absent.
"""

import re
from typing import Iterable, List, Optional


HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

TRUE_VALUES = {"1", "t", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "f", "false", "no", "n", "off"}

# Range of the INTEGER columns; anything wider cannot be bound as a parameter
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def validate_hex_color(color: str) -> bool:
    """
    Validate a ``#RRGGBB`` color code.

    Args:
        color: Color string

    Returns:
        True if color is a six digit hex code, False otherwise
    """
    return bool(color) and HEX_COLOR_PATTERN.match(color) is not None


def validate_http_url(url: str) -> bool:
    """Check that a URL uses the http or https scheme."""
    return url.startswith("http://") or url.startswith("https://")


def parse_optional_int(
    value: Optional[str],
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> Optional[int]:
    """
    Parse an integer query parameter.

    Both bounds are narrowed to the INTEGER column range.

    Args:
        value: Raw parameter value
        minimum: Smallest accepted value (inclusive)
        maximum: Largest accepted value (inclusive)

    Returns:
        The integer, or None when the value is missing, malformed or out of range
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    low = INT_MIN if minimum is None else max(minimum, INT_MIN)
    high = INT_MAX if maximum is None else min(maximum, INT_MAX)
    if not low <= number <= high:
        return None
    return number


def parse_optional_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean query parameter; unknown spellings yield None."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


def parse_csv(values: Iterable[str]) -> List[str]:
    """
    Split comma-separated values, trimming items and dropping blanks.

    Repeated parameters (``?tags=a&tags=b,c``) are flattened in order and
    duplicates are removed.
    """
    items: List[str] = []
    for raw in values:
        for part in raw.split(","):
            item = part.strip()
            if item and item not in items:
                items.append(item)
    return items


def parse_int_list(values: Iterable[str]) -> List[int]:
    """Parse comma-separated integers, dropping anything that does not parse."""
    numbers: List[int] = []
    for item in parse_csv(values):
        number = parse_optional_int(item)
        if number is not None and number not in numbers:
            numbers.append(number)
    return numbers
