"""Generic section-based extraction for pages without structured data.

The page is flattened to lines, then an ingredients heading and a steps
heading are located. Ingredients run up to the steps heading; steps run up to
the first stop heading (nutrition, notes, comments, ...) so trailing page
boilerplate is not read as cooking steps.
"""
from __future__ import annotations
import html
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from mealcart.domain.Recipe import Recipe, infer_meal_type
from mealcart.logic.ingredients.normalize import normalize_servings, normalize_steps
from mealcart.logic.ingredients.parser import parse_ingredients
from mealcart.utilities.constants import (
    DEFAULT_SERVINGS, INGREDIENT_HEADINGS, STEP_HEADINGS, STOP_HEADINGS,
)

__all__ = [
    "html_to_lines", "find_heading", "split_numbered_steps", "title_from_source_url",
    "servings_from_text", "extract_sections", "extract_heuristic_recipe",
]

HEADING_MAX_LENGTH = 40
DESCRIPTION_MIN_LENGTH = 30
FALLBACK_TITLE = "Imported Recipe"

_BLOCK_TAGS = [
    "p", "div", "li", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article",
    "header", "footer", "tr", "table", "blockquote",
]
_MD_HEADING_RE = re.compile(r"^#{1,6}\s*")
_HEADING_KEY_RE = re.compile(r"[\W_]+")
_TITLE_RE = re.compile(r"^title\s*:\s*", re.I)
_DESCRIPTION_RE = re.compile(r"^description\s*:\s*", re.I)
_URL_RE = re.compile(r"^https?://", re.I)
# Metadata lines the read proxy puts above the page content
_PROXY_META_RE = re.compile(r"^(title|url source|published time|markdown content)\s*:", re.I)
_STEP_SPLIT_RE = re.compile(r"(?<=\s)(?=\d{1,2}[.)]\s+)")
_SERVINGS_PATTERNS = (
    re.compile(r"\bserves?\s*:?\s+(\d{1,3})", re.I),
    re.compile(r"\byields?\s*:?\s*(\d{1,3})", re.I),
    re.compile(r"\bservings?\s*:\s*(\d{1,3})", re.I),
    re.compile(r"(\d{1,3})\s+servings?\b", re.I),
)


def html_to_lines(text: Any) -> List[str]:
    """Flatten HTML (or markdown, or plain text) into trimmed non-empty lines."""
    soup = BeautifulSoup(str(text or "").replace("\r", ""), "html.parser")
    for node in soup(["script", "style"]):
        node.decompose()
    for node in soup.find_all("br"):
        node.replace_with("\n")
    for node in soup.find_all(_BLOCK_TAGS):
        if node.name == "li":
            node.insert(0, "- ")
        node.insert_before("\n")
        node.insert_after("\n")
    # pages that encode entities twice
    raw = html.unescape(soup.get_text())
    lines = []
    for line in raw.split("\n"):
        line = _MD_HEADING_RE.sub("", re.sub(r"\s+", " ", line).strip())
        if line:
            lines.append(line)
    return lines


def _heading_key(value: str) -> str:
    return _HEADING_KEY_RE.sub("", value.lower())


def _matches_heading(line: str, keys: Sequence[str]) -> bool:
    if len(line) > HEADING_MAX_LENGTH:
        return False
    normalized = _heading_key(line)
    return bool(normalized) and any(normalized == k or normalized.startswith(k) for k in keys)


def find_heading(lines: Sequence[str], headings: Iterable[str], start: int = 0) -> int:
    '''Index of the first line at or after start that reads as one of the headings, else -1.'''
    keys = [k for k in (_heading_key(h) for h in headings) if k]
    for i in range(max(start, 0), len(lines)):
        if _matches_heading(lines[i], keys):
            return i
    return -1


def split_numbered_steps(lines: Iterable[str]) -> List[str]:
    """'Preheat. 2. Bake.' on one line becomes two steps."""
    steps: List[str] = []
    for line in lines:
        cleaned = re.sub(r"^[-*•]\s+", "", line.strip())
        steps.extend(c for c in (c.strip() for c in _STEP_SPLIT_RE.split(cleaned)) if c)
    return normalize_steps(steps)


def title_from_source_url(source_url: Any) -> str:
    try:
        hostname = urlparse(str(source_url or "")).hostname or ""
    except ValueError:
        return FALLBACK_TITLE
    base = re.sub(r"^www\.", "", hostname).split(".")[0]
    words = [w for w in re.split(r"[-_]", base) if w]
    if not words:
        return FALLBACK_TITLE
    return " ".join(w[:1].upper() + w[1:] for w in words)


def servings_from_text(text: Any, fallback: int = DEFAULT_SERVINGS) -> int:
    raw = str(text or "")
    for pattern in _SERVINGS_PATTERNS:
        match = pattern.search(raw)
        if match:
            return normalize_servings(match.group(1), fallback)
    return fallback


def _title(lines: List[str], source_url: str) -> str:
    for line in lines:
        if _TITLE_RE.match(line):
            explicit = _TITLE_RE.sub("", line).strip()
            if explicit:
                return explicit
    if lines:
        return lines[0]
    return title_from_source_url(source_url)


def _description(lines: List[str], first_section: int) -> str:
    for line in lines:
        if _DESCRIPTION_RE.match(line):
            explicit = _DESCRIPTION_RE.sub("", line).strip()
            if explicit:
                return explicit
    for line in lines[1:first_section]:
        if len(line) >= DESCRIPTION_MIN_LENGTH and not _URL_RE.match(line) and not _PROXY_META_RE.match(line):
            return line
    return ""


def extract_sections(text: Any, source_url: str = "",
                     ingredient_catalog: Optional[Mapping[str, Any]] = None,
                     stores: Optional[Iterable[Any]] = None,
                     ingredient_headings: Sequence[str] = INGREDIENT_HEADINGS,
                     step_headings: Sequence[str] = STEP_HEADINGS,
                     stop_headings: Sequence[str] = STOP_HEADINGS) -> Recipe:
    '''
    Section-boundary extraction shared by the generic strategy and the site
    adapters (which only swap the heading vocabulary).
    '''
    lines = html_to_lines(text)
    ingredients_start = find_heading(lines, ingredient_headings)
    steps_start = find_heading(lines, step_headings, ingredients_start + 1) if ingredients_start >= 0 else -1
    if steps_start < 0:
        steps_start = find_heading(lines, step_headings)

    ingredient_lines: List[str] = []
    if ingredients_start >= 0:
        end = steps_start if steps_start > ingredients_start else len(lines)
        ingredient_lines = lines[ingredients_start + 1:end]

    step_lines: List[str] = []
    if steps_start >= 0:
        stop = find_heading(lines, stop_headings, steps_start + 1)
        end = stop if stop > steps_start else len(lines)
        step_lines = lines[steps_start + 1:end]
        if ingredients_start > steps_start:
            # steps listed first: keep them out of the ingredient section
            step_lines = step_lines[:max(0, ingredients_start - steps_start - 1)]

    found = [i for i in (ingredients_start, steps_start) if i >= 0]
    first_section = min(found) if found else len(lines)
    title = _title(lines, source_url)
    description = _description(lines, first_section)
    return Recipe(
        title=title,
        meal_type=infer_meal_type([title, description]),
        description=description,
        servings=servings_from_text(text),
        ingredients=parse_ingredients(ingredient_lines, ingredient_catalog, stores),
        steps=split_numbered_steps(step_lines),
        source_url=source_url,
    )


def extract_heuristic_recipe(text: Any, source_url: str = "",
                             ingredient_catalog: Optional[Mapping[str, Any]] = None,
                             stores: Optional[Iterable[Any]] = None) -> Recipe:
    return extract_sections(text, source_url, ingredient_catalog, stores)
