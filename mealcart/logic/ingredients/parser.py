"""Ingredient line parser.

Turns pasted or scraped ingredient text into Ingredient objects. Two line
shapes are understood:

    CSV       ``name, qty, unit, store``  (qty/unit/store optional)
    freeform  ``1 1/2 cups flour``, ``(1/2 cup) butter``, ``2 eggs``

Lines that cannot yield an ingredient (shop widgets, headings, punctuation,
markdown images) are returned as skipped lines instead of being dropped.
Nothing in here raises on bad input.
"""
from __future__ import annotations
import html
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from mealcart.domain.Ingredient import Ingredient
from mealcart.logic.ingredients.fractions import parse_fraction, quantity_or_default
from mealcart.logic.ingredients.normalize import (
    normalize_name, normalize_unit, resolve_ingredient_store,
)
from mealcart.utilities.constants import (
    DEFAULT_UNIT, KNOWN_UNITS, NOISE_PATTERNS, SECTION_HEADING_WORDS, UNICODE_FRACTIONS,
)

logger = logging.getLogger(__name__)

__all__ = [
    "clean_line", "skip_reason", "parse_ingredient_line",
    "parse_ingredients_with_diagnostics", "parse_ingredients",
]

_GLYPHS = "".join(UNICODE_FRACTIONS)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_BULLET_RE = re.compile(r"^(?:[-*•‣◦⁃]\s*)+")
_LIST_NUMBER_RE = re.compile(r"^\d{1,2}[.)]\s+(?=[\d" + _GLYPHS + r"(])")
_PUNCT_ONLY_RE = re.compile(r"^[\W_]+$")
_MD_IMAGE_RE = re.compile(r"^!\[[^\]]*\]\([^)]*\)$")
_MD_LINK_RE = re.compile(r"^\[[^\]]*\]\([^)]*\)$")
_HEADING_NORMALIZE_RE = re.compile(r"[\W_]+")
# 1, 1.5, .5, 1,5, 1/2, 1-1/2, ½, 1½
_QTY_TOKEN_RE = re.compile(
    rf"^(?:\d+(?:[.,]\d+)?|\.\d+|\d+/\d+|\d+-\d+/\d+|\d*[{_GLYPHS}])$"
)
_FRACTION_PART_RE = re.compile(rf"^(?:\d+/\d+|[{_GLYPHS}])$")
_TRAILING_NOTE_RE = re.compile(
    r",?\s*\b(divided|optional|to taste|or more|as needed|for garnish|for serving)$", re.I
)
_LEADING_OF_RE = re.compile(r"^of\s+", re.I)
_COMMA_DECIMAL_RE = re.compile(r"^(\d+),(\d+)(?=\s)")


def clean_line(raw: Any) -> str:
    '''Decode entities (twice, for double-encoded pages), drop tags, collapse spaces and bullets.'''
    text = html.unescape(html.unescape(str(raw or "")))
    text = _TAG_RE.sub(" ", text)
    text = _WS_RE.sub(" ", text).strip()
    return _BULLET_RE.sub("", text).strip()


def _heading_key(text: str) -> str:
    return _HEADING_NORMALIZE_RE.sub("", text.lower())


def skip_reason(line: str) -> Optional[str]:
    """Return why a cleaned line is not an ingredient, or None if it may be one."""
    if len(line) < 3:
        return "too short"
    if _PUNCT_ONLY_RE.match(line):
        return "punctuation"
    if any(p.search(line) for p in NOISE_PATTERNS):
        return "noise"
    if _MD_IMAGE_RE.match(line) or _MD_LINK_RE.match(line):
        return "markdown"
    if _heading_key(line) in SECTION_HEADING_WORDS:
        return "heading"
    return None


def _is_qty_token(token: str) -> bool:
    return bool(_QTY_TOKEN_RE.match(token))


def _unit_token(token: str) -> Optional[str]:
    cleaned = token.lower().rstrip(".,")
    return cleaned if cleaned in KNOWN_UNITS else None


def _read_quantity(tokens: List[str]) -> Tuple[Optional[float], int]:
    '''Returns (qty, tokens consumed). A zero/invalid quantity like "1/0" is consumed and read as 1.'''
    if len(tokens) >= 2 and tokens[0].isdigit() and _FRACTION_PART_RE.match(tokens[1]):
        # "1 1/2", "1 ½"
        qty = parse_fraction(f"{tokens[0]} {tokens[1]}")
        return quantity_or_default(qty), 2
    if tokens and _is_qty_token(tokens[0]):
        return quantity_or_default(tokens[0]), 1
    return None, 0


def _group_end(text: str) -> int:
    '''Index of the ")" closing the "(" at text[0], or -1 when unbalanced.'''
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _parse_measurement(text: str) -> Optional[Tuple[float, str]]:
    '''"1/2 cup" -> (0.5, "cup"); "(1 cup)" -> (1.0, "cup"); "2" -> (2.0, "each"); anything else -> None.'''
    while text.startswith("(") and _group_end(text) == len(text) - 1:
        text = text[1:-1].strip()
    tokens = text.split()
    qty, used = _read_quantity(tokens)
    if qty is None:
        return None
    rest = tokens[used:]
    if not rest:
        return qty, DEFAULT_UNIT
    unit = _unit_token(" ".join(rest))
    if unit:
        return qty, normalize_unit(unit)
    return None


def _strip_leading_groups(text: str) -> Tuple[str, Optional[Tuple[float, str]]]:
    '''
    Removes balanced leading "(...)" groups that hold a measurement, e.g.
    "(1/2 cup) butter" -> ("butter", (0.5, "cup")). The first group wins.
    '''
    found: Optional[Tuple[float, str]] = None
    while text.startswith("("):
        end = _group_end(text)
        if end < 0:
            break
        measurement = _parse_measurement(text[1:end].strip())
        if measurement is None:
            break
        found = found or measurement
        text = text[end + 1:].strip()
    return text, found


def _finish_name(name: str) -> str:
    name = _TRAILING_NOTE_RE.sub("", name.strip())
    name = _LEADING_OF_RE.sub("", name.strip(" ,;"))
    return normalize_name(name.strip(" ,;"))


def _parse_freeform(text: str) -> Tuple[str, float, str]:
    text = _LIST_NUMBER_RE.sub("", text)
    text, measured = _strip_leading_groups(text)
    if measured:
        return _finish_name(text), measured[0], measured[1]

    tokens = text.split()
    qty, used = _read_quantity(tokens)
    if qty is None:
        return _finish_name(text), 1.0, DEFAULT_UNIT

    rest = tokens[used:]
    # "2 (14 oz) cans tomatoes": the size note is not the unit
    rest_text, _ = _strip_leading_groups(" ".join(rest))
    rest = rest_text.split()
    unit = DEFAULT_UNIT
    if len(rest) > 1 and _unit_token(rest[0]):
        unit = normalize_unit(_unit_token(rest[0]))
        rest = rest[1:]
    return _finish_name(" ".join(rest)), qty, unit


def parse_ingredient_line(line: Any, ingredient_catalog: Optional[Mapping[str, Any]] = None,
                          stores: Optional[Iterable[Any]] = None) -> Optional[Ingredient]:
    """Parse one line. Returns None when the line does not describe an ingredient."""
    text = clean_line(line)
    if not text or skip_reason(text):
        return None

    text = _COMMA_DECIMAL_RE.sub(r"\1.\2", text)
    raw_store: Any = None
    if "," in text:
        fields = [f.strip() for f in text.split(",")]
        first_tokens = fields[0].split()
        if first_tokens and (_is_qty_token(first_tokens[0]) or fields[0].startswith("(")):
            # "2 cloves garlic, minced": freeform with a trailing note
            name, qty, unit = _parse_freeform(fields[0])
            if not name or _unit_token(name):
                # "10 ounces, chopped spinach": the name is after the comma
                name, qty, unit = _parse_freeform(" ".join(f for f in fields if f))
        else:
            name = _finish_name(fields[0])
            qty = quantity_or_default(fields[1] if len(fields) > 1 else None)
            unit = normalize_unit(fields[2]) if len(fields) > 2 and fields[2] else DEFAULT_UNIT
            raw_store = fields[3] if len(fields) > 3 else None
    else:
        name, qty, unit = _parse_freeform(text)

    if not name or _PUNCT_ONLY_RE.match(name):
        return None
    return Ingredient(
        name=name,
        qty=qty,
        unit=unit,
        store=resolve_ingredient_store(name, raw_store, ingredient_catalog, stores),
    )


def parse_ingredients_with_diagnostics(text: Any, ingredient_catalog: Optional[Mapping[str, Any]] = None,
                                       stores: Optional[Iterable[Any]] = None) -> dict:
    '''
    Parses a blob, one ingredient per line.
    Returns {"ingredients": [Ingredient], "skippedLines": [raw line]}.
    '''
    if isinstance(text, (list, tuple)):
        lines = [str(item or "") for item in text]
    else:
        lines = str(text or "").splitlines()

    ingredients: List[Ingredient] = []
    skipped: List[str] = []
    for raw in lines:
        trimmed = raw.strip()
        if not trimmed:
            continue
        ingredient = parse_ingredient_line(trimmed, ingredient_catalog, stores)
        if ingredient is None:
            skipped.append(trimmed)
            continue
        ingredients.append(ingredient)

    if skipped:
        logger.debug("Skipped %d ingredient line(s): %s", len(skipped), skipped)
    return {"ingredients": ingredients, "skippedLines": skipped}


def parse_ingredients(text: Any, ingredient_catalog: Optional[Mapping[str, Any]] = None,
                      stores: Optional[Iterable[Any]] = None) -> List[Ingredient]:
    return parse_ingredients_with_diagnostics(text, ingredient_catalog, stores)["ingredients"]
