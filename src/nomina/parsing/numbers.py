"""Lenient numeric parsing for amounts and counts.

Values are read from their longest numeric prefix ("12.5abc" -> 12.5), and
input without one becomes NaN instead of raising. Strict mode rejects
anything that is not a complete number.
"""

from __future__ import annotations

import math
import re

NAN = float("nan")

_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"[+-]?\d+")


def parse_amount(raw: str | None, strict: bool = False) -> float:
    """Parse a decimal amount using "." as separator regardless of locale."""
    text = (raw or "").lstrip()
    match = _FLOAT_PREFIX.match(text)
    if strict and (match is None or match.end() != len(text.rstrip())):
        raise ValueError(f"invalid amount {raw!r}")
    if match is None:
        return NAN
    return float(match.group())


def parse_count(raw: str | None, strict: bool = False) -> int | float:
    """Parse a base-10 integer; NaN when there are no leading digits."""
    text = (raw or "").lstrip()
    match = _INT_PREFIX.match(text)
    if strict and (match is None or match.end() != len(text.rstrip())):
        raise ValueError(f"invalid count {raw!r}")
    if match is None:
        return NAN
    return int(match.group())


def is_nan(value: int | float) -> bool:
    return isinstance(value, float) and math.isnan(value)
