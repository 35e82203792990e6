"""schema.org Recipe extraction from <script type="application/ld+json"> blocks."""
from __future__ import annotations
import html
import json
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from bs4 import BeautifulSoup

from mealcart.domain.Recipe import Recipe, infer_meal_type
from mealcart.logic.ingredients.normalize import normalize_steps
from mealcart.logic.ingredients.parser import parse_ingredients
from mealcart.utilities.constants import DEFAULT_SERVINGS

logger = logging.getLogger(__name__)

__all__ = ["find_jsonld_payloads", "collect_recipe_nodes", "parse_recipe_yield", "extract_jsonld_recipe"]

MAX_DEPTH = 12
_LD_JSON_TYPE_RE = re.compile(r"ld\+json", re.I)
_WS_RE = re.compile(r"\s+")
_YIELD_RE = re.compile(r"(\d{1,3})")


def _clean_payload(raw: str) -> str:
    text = raw.strip()
    text = re.sub(r"^<!--", "", text)
    text = re.sub(r"-->$", "", text.strip())
    text = re.sub(r"^/\*\s*<!\[CDATA\[\s*\*/", "", text.strip(), flags=re.I)
    text = re.sub(r"/\*\s*\]\]>\s*\*/$", "", text.strip(), flags=re.I)
    return text.strip().rstrip(";").strip()


def _load_payload(raw: str) -> Optional[Any]:
    cleaned = _clean_payload(raw)
    if not cleaned:
        return None
    for attempt in (cleaned, html.unescape(cleaned)):
        try:
            return json.loads(attempt, strict=False)
        except json.JSONDecodeError:
            continue
    logger.debug("Ignoring malformed JSON-LD block (%d chars)", len(cleaned))
    return None


def find_jsonld_payloads(text: str) -> List[Any]:
    '''Parsed JSON values of every ld+json block; a bare JSON document counts as one block.'''
    payloads: List[Any] = []
    if "ld+json" in text.lower():
        soup = BeautifulSoup(text, "html.parser")
        for script in soup.find_all("script", attrs={"type": _LD_JSON_TYPE_RE}):
            raw = script.string or script.get_text()
            data = _load_payload(raw or "")
            if data is not None:
                payloads.append(data)
        return payloads

    stripped = text.strip()
    if stripped.startswith(("{", "[")):
        data = _load_payload(stripped)
        if data is not None:
            payloads.append(data)
    return payloads


def _is_recipe_type(value: Any) -> bool:
    types = value if isinstance(value, list) else [value]
    for t in types:
        if not isinstance(t, str):
            continue
        # "Recipe", "schema:Recipe", "http://schema.org/Recipe"
        if re.split(r"[/:]", t)[-1].strip().lower() == "recipe":
            return True
    return False


def collect_recipe_nodes(node: Any, sink: Optional[List[dict]] = None, depth: int = 0) -> List[dict]:
    """Walk lists, @graph and nested objects collecting every Recipe-typed dict."""
    if sink is None:
        sink = []
    if depth > MAX_DEPTH or not node:
        return sink
    if isinstance(node, list):
        for item in node:
            collect_recipe_nodes(item, sink, depth + 1)
    elif isinstance(node, dict):
        if _is_recipe_type(node.get("@type")):
            sink.append(node)
        for key, value in node.items():
            if key != "@type" and isinstance(value, (list, dict)):
                collect_recipe_nodes(value, sink, depth + 1)
    return sink


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return _WS_RE.sub(" ", html.unescape(value)).strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, list):
        return " ".join(t for t in (_as_text(v) for v in value) if t)
    if isinstance(value, dict):
        return _as_text(value.get("text") or value.get("name") or "")
    return ""


def _ingredient_lines(node: Mapping[str, Any]) -> List[str]:
    raw = node.get("recipeIngredient") or node.get("ingredients") or []
    values = raw if isinstance(raw, list) else [raw]
    return [line for line in (_as_text(v) for v in values) if line]


def _instruction_lines(value: Any, depth: int = 0) -> List[str]:
    if depth > MAX_DEPTH or not value:
        return []
    if isinstance(value, str):
        return [line for line in (_as_text(chunk) for chunk in value.splitlines()) if line]
    if isinstance(value, list):
        lines: List[str] = []
        for item in value:
            lines.extend(_instruction_lines(item, depth + 1))
        return lines
    if isinstance(value, dict):
        # HowToSection
        if value.get("itemListElement"):
            return _instruction_lines(value["itemListElement"], depth + 1)
        text = _as_text(value.get("text")) or _as_text(value.get("name"))
        return [text] if text else []
    return []


def _dedupe(lines: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for line in lines:
        if line not in seen:
            seen.add(line)
            out.append(line)
    return out


def _instructions(node: Mapping[str, Any]) -> List[str]:
    raw = node.get("recipeInstructions") or node.get("instructions") or node.get("steps")
    return normalize_steps(_dedupe(_instruction_lines(raw)))


def parse_recipe_yield(value: Any) -> int:
    '''"4 servings" -> 4, "6-8" -> 6, 12 -> 12; clamped to 1..100, defaults to 4.'''
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(1, min(100, int(round(value)))) if value > 0 else DEFAULT_SERVINGS
    match = _YIELD_RE.search(_as_text(value))
    if not match or int(match.group(1)) <= 0:
        return DEFAULT_SERVINGS
    return max(1, min(100, int(match.group(1))))


def extract_jsonld_recipe(text: str, source_url: str = "",
                          ingredient_catalog: Optional[Mapping[str, Any]] = None,
                          stores: Optional[Iterable[Any]] = None) -> Optional[Recipe]:
    """Best schema.org Recipe on the page, or None when there is none."""
    nodes: List[dict] = []
    for payload in find_jsonld_payloads(str(text or "")):
        collect_recipe_nodes(payload, nodes)
    if not nodes:
        return None

    best = max(nodes, key=lambda n: len(_ingredient_lines(n)) + len(_instructions(n)))
    title = _as_text(best.get("name"))
    description = _as_text(best.get("description"))
    return Recipe(
        title=title,
        meal_type=infer_meal_type([
            _as_text(best.get("recipeCategory")), _as_text(best.get("keywords")), title,
        ]),
        description=description,
        servings=parse_recipe_yield(best.get("recipeYield") or best.get("yield")),
        ingredients=parse_ingredients(_ingredient_lines(best), ingredient_catalog, stores),
        steps=_instructions(best),
        source_url=source_url,
    )
