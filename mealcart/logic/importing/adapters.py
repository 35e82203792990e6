"""Per-site heading vocabularies for recipe sites whose markup the generic headings miss."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlparse

from mealcart.domain.Recipe import Recipe
from mealcart.logic.importing.heuristic import extract_sections
from mealcart.utilities.constants import STOP_HEADINGS

logger = logging.getLogger(__name__)

__all__ = ["DomainAdapter", "ADAPTERS", "match_adapter", "extract_adapter_recipe"]


@dataclass(frozen=True)
class DomainAdapter:
    hostname_suffixes: Tuple[str, ...]
    ingredient_headings: Tuple[str, ...]
    step_headings: Tuple[str, ...]
    stop_headings: Tuple[str, ...] = STOP_HEADINGS


ADAPTERS: Tuple[DomainAdapter, ...] = (
    # The ingredient checklist opens with a "Deselect All" toggle
    DomainAdapter(("foodnetwork.com",), ("deselect all", "ingredients"), ("directions",)),
    DomainAdapter(("allrecipes.com",), ("ingredients",), ("directions", "steps")),
    DomainAdapter(("seriouseats.com",), ("ingredients",), ("directions", "method")),
    DomainAdapter(("bonappetit.com", "epicurious.com"), ("ingredients",), ("preparation", "directions")),
    DomainAdapter(("cooking.nytimes.com",), ("ingredients",), ("preparation",),
                  STOP_HEADINGS + ("private notes", "cooking notes")),
    DomainAdapter(("budgetbytes.com",), ("ingredients",), ("instructions",)),
)


def _hostname(url: Any) -> str:
    try:
        host = urlparse(str(url or "")).hostname or ""
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


def match_adapter(source_url: Any) -> Optional[DomainAdapter]:
    host = _hostname(source_url)
    if not host:
        return None
    for adapter in ADAPTERS:
        for suffix in adapter.hostname_suffixes:
            if host == suffix or host.endswith("." + suffix):
                return adapter
    return None


def extract_adapter_recipe(text: Any, source_url: str = "",
                           ingredient_catalog: Optional[Mapping[str, Any]] = None,
                           stores: Optional[Iterable[Any]] = None) -> Optional[Recipe]:
    """Section extraction with the matched site's vocabulary; None for unknown sites."""
    adapter = match_adapter(source_url)
    if adapter is None:
        return None
    logger.debug("Using site adapter %s for %s", adapter.hostname_suffixes[0], source_url)
    return extract_sections(
        text, source_url, ingredient_catalog, stores,
        ingredient_headings=adapter.ingredient_headings,
        step_headings=adapter.step_headings,
        stop_headings=adapter.stop_headings,
    )
