"""Quantity parsing: integers, decimals, slash/mixed fractions and unicode glyphs.

parse_fraction never raises; anything it cannot read (including a zero
denominator) comes back as NaN and callers fall back to a quantity of 1.
"""
from __future__ import annotations
import math
import re
from typing import Any

from mealcart.utilities.constants import UNICODE_FRACTIONS

__all__ = ["parse_fraction", "quantity_or_default", "is_quantity"]

_GLYPHS = "".join(UNICODE_FRACTIONS)
_GLYPH_RE = re.compile(f"([{_GLYPHS}])")
_DECIMAL_RE = re.compile(r"^\d+(?:\.\d+)?$|^\.\d+$")
_SLASH_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_MIXED_RE = re.compile(r"^(\d+)(?:\s+|-)(\d+)\s*/\s*(\d+)$")
_COMMA_DECIMAL_RE = re.compile(r"^(\d+),(\d+)$")


def _expand_glyphs(raw: str) -> str:
    # "1½" -> "1 1/2", "½" -> "1/2"
    return _GLYPH_RE.sub(lambda m: f" {UNICODE_FRACTIONS[m.group(1)]}", raw).strip()


def _divide(numerator: str, denominator: str) -> float:
    den = int(denominator)
    if den == 0:
        return math.nan
    return int(numerator) / den


def parse_fraction(value: Any) -> float:
    """Return the numeric value of a quantity token, or NaN if it is not one."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    raw = _expand_glyphs(str(value or "").strip())
    raw = re.sub(r"\s+", " ", raw).rstrip(",")
    if not raw:
        return math.nan

    comma = _COMMA_DECIMAL_RE.match(raw)
    if comma:
        raw = f"{comma.group(1)}.{comma.group(2)}"

    if _DECIMAL_RE.match(raw):
        return float(raw)

    slash = _SLASH_RE.match(raw)
    if slash:
        return _divide(slash.group(1), slash.group(2))

    mixed = _MIXED_RE.match(raw)
    if mixed:
        fraction = _divide(mixed.group(2), mixed.group(3))
        return int(mixed.group(1)) + fraction

    return math.nan


def is_quantity(value: Any) -> bool:
    qty = parse_fraction(value)
    return math.isfinite(qty) and qty > 0


def quantity_or_default(value: Any, default: float = 1.0) -> float:
    qty = parse_fraction(value)
    if not math.isfinite(qty) or qty <= 0:
        return default
    return qty
