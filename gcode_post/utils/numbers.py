"""Lenient number parsing for values embedded in NC program text."""
import re
from typing import Optional

# Longest numeric prefix, e.g. "10.5)" -> "10.5", "-.25mm" -> "-.25"
LEADING_NUMBER_RE = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def parse_leading_float(text: str) -> Optional[float]:
    """
    Parse the numeric prefix of a word value.

    CAM output frequently glues words to trailing punctuation (``X10.5)``)
    so only the leading number is read.

    Args:
        text: Text following the address letter

    Returns:
        The parsed value, or None when the text has no numeric prefix
    """
    match = LEADING_NUMBER_RE.match(text)
    if not match:
        return None
    return float(match.group(0))


def format_number(value: float) -> str:
    """Format a feed rate or similar value without a trailing '.0'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
