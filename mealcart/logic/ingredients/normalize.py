"""Name, unit, store and servings normalization shared across the package."""
from __future__ import annotations
import math
import re
from typing import Any, Iterable, Mapping, Optional

from mealcart.utilities.constants import (
    DEFAULT_SERVINGS, DEFAULT_STORES, DEFAULT_UNIT, UNASSIGNED, UNIT_SYNONYMS,
)

__all__ = [
    "normalize_name", "normalize_unit", "normalize_store_list", "pick_store",
    "catalog_store", "resolve_ingredient_store", "normalize_servings",
    "parse_optional_servings", "normalize_steps",
]

_STEP_NUMBER_RE = re.compile(r"^(?:step\s*)?\d{1,2}\s*[).:-](?!\d)\s*", re.I)
_BULLET_RE = re.compile(r"^[-*•]\s+")


def normalize_name(value: Any) -> str:
    return str(value or "").strip().lower()


def normalize_unit(unit: Any) -> str:
    normalized = str(unit or DEFAULT_UNIT).strip().lower().rstrip(".")
    return UNIT_SYNONYMS.get(normalized, normalized) or DEFAULT_UNIT


def _store_label(value: Any) -> str:
    return re.sub(r"\s+", " ", str(value or "").strip())


def normalize_store_list(raw_stores: Optional[Iterable[Any]] = None) -> list[str]:
    """Default stores first, then custom ones (deduplicated), then Unassigned last."""
    stores = list(DEFAULT_STORES)
    seen = {normalize_name(s) for s in stores}
    if isinstance(raw_stores, (list, tuple)):
        for store in raw_stores:
            label = _store_label(store)
            key = normalize_name(label)
            if not label or key == normalize_name(UNASSIGNED) or key in seen:
                continue
            seen.add(key)
            stores.append(label)
    stores.append(UNASSIGNED)
    return stores


def pick_store(store: Any, available_stores: Optional[Iterable[Any]] = None) -> str:
    """Return the canonical spelling of a known store, or Unassigned."""
    cleaned = normalize_name(store)
    if not cleaned:
        return UNASSIGNED
    for candidate in normalize_store_list(available_stores):
        if candidate.lower() == cleaned:
            return candidate
    return UNASSIGNED


def catalog_store(name: str, ingredient_catalog: Optional[Mapping[str, Any]],
                  available_stores: Optional[Iterable[Any]] = None) -> str:
    """Look up the preferred store for an ingredient name.

    Catalog entries are ``{"store": ..., "tag": ...}``; a bare store string is
    accepted for catalogs saved before tags existed.
    """
    if not isinstance(ingredient_catalog, Mapping):
        return UNASSIGNED
    entry = ingredient_catalog.get(normalize_name(name))
    if isinstance(entry, Mapping):
        entry = entry.get("store") or entry.get("preferredStore")
    return pick_store(entry, available_stores)


def resolve_ingredient_store(name: str, raw_store: Any, ingredient_catalog: Optional[Mapping[str, Any]],
                             available_stores: Optional[Iterable[Any]] = None) -> str:
    explicit = str(raw_store or "").strip()
    if explicit:
        return pick_store(explicit, available_stores)
    return catalog_store(name, ingredient_catalog, available_stores)


def normalize_servings(value: Any, fallback: int = DEFAULT_SERVINGS) -> int:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(numeric) or numeric < 1:
        return fallback
    # round half up, matching how servings are typed into the UI
    return int(math.floor(numeric + 0.5))


def parse_optional_servings(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric) or numeric < 1:
        return None
    return int(math.floor(numeric + 0.5))


def normalize_steps(raw_steps: Any) -> list[str]:
    """Strip bullets and leading step numbers; accepts a list or a newline blob."""
    if isinstance(raw_steps, (list, tuple)):
        lines = [str(step or "").strip() for step in raw_steps]
    else:
        lines = [_BULLET_RE.sub("", line.strip()) for line in str(raw_steps or "").split("\n")]
    steps = []
    for line in lines:
        cleaned = _STEP_NUMBER_RE.sub("", _BULLET_RE.sub("", line)).strip()
        if cleaned:
            steps.append(cleaned)
    return steps
