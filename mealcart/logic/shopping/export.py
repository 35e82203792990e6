"""Plain-text and printable HTML renderings of a store-grouped grocery list."""
import html
import math
from typing import Any, Iterable, List, Mapping, Optional

from mealcart.domain.ShoppingList import GroceryLineItem
from mealcart.logic.ingredients.normalize import normalize_store_list
from mealcart.utilities.constants import CHECKLIST_STORE, UNASSIGNED

__all__ = [
    "format_qty", "display_name", "format_item", "build_store_export",
    "build_stores_export", "build_print_checklist_html",
]

CHECKLIST_STYLE = """
      body { font-family: "Manrope", "Avenir Next", "Trebuchet MS", sans-serif; margin: 24px; color: #17271f; }
      h1 { margin: 0 0 12px; font-size: 24px; }
      h2 { margin: 20px 0 8px; font-size: 18px; border-bottom: 1px solid #d9d6c9; padding-bottom: 4px; }
      ul { list-style: none; padding: 0; margin: 0; }
      li { display: grid; grid-template-columns: 22px 1fr; gap: 8px; margin: 5px 0; }
      .box { font-size: 16px; line-height: 1.2; }
      @media print { body { margin: 12px; } }
"""


def format_qty(qty: Any) -> str:
    '''Two decimals at most, no trailing zeros: 1.5 -> "1.5", 5.0 -> "5", 1/3 -> "0.33".'''
    try:
        value = float(qty)
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(value):
        return ""
    return f"{round(value, 2):.2f}".rstrip("0").rstrip(".")


def display_name(name: Any) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in str(name or "").split(" ") if word)


def format_item(item: GroceryLineItem) -> str:
    return " ".join(f"{format_qty(item.qty)} {item.unit} {display_name(item.name)}".split())


def build_store_export(store: str, items: Optional[List[GroceryLineItem]]) -> str:
    """One store's section; empty string when the store has nothing to buy."""
    if not items:
        return ""
    if store == CHECKLIST_STORE:
        lines = [f"{store} In-Store Checklist", ""]
        lines.extend(f"- [ ] {format_item(item)}" for item in items)
    elif store != UNASSIGNED:
        lines = [f"{store} Cart-Ready List", ""]
        lines.extend(f"- {format_item(item)}" for item in items)
    else:
        lines = ["Unassigned Grocery Items", ""]
        lines.extend(f"- {format_item(item)}" for item in items)
    return "\n".join(lines)


def build_stores_export(grouped: Mapping[str, List[GroceryLineItem]],
                        stores: Optional[Iterable[Any]] = None) -> str:
    store_list = normalize_store_list(stores) if stores is not None else list(grouped)
    sections = [build_store_export(store, grouped.get(store) or []) for store in store_list]
    return "\n\n".join(s for s in sections if s)


def build_print_checklist_html(grouped: Mapping[str, List[GroceryLineItem]],
                               stores: Optional[Iterable[Any]] = None) -> str:
    '''Standalone printable page, one <section> per store with items; empty string if nothing to buy.'''
    store_list = normalize_store_list(stores) if stores is not None else list(grouped)
    sections = []
    for store in store_list:
        items = grouped.get(store) or []
        if not items:
            continue
        list_items = "".join(
            f'<li><span class="box">□</span><span>{html.escape(format_item(item))}</span></li>'
            for item in items
        )
        sections.append(f"<section><h2>{html.escape(store)}</h2><ul>{list_items}</ul></section>")

    if not sections:
        return ""
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "  <head>\n"
        '    <meta charset="utf-8" />\n'
        "    <title>Meal Planner Checklist</title>\n"
        f"    <style>{CHECKLIST_STYLE}    </style>\n"
        "  </head>\n"
        "  <body>\n"
        "    <h1>Grocery Checklist</h1>\n"
        f"    {''.join(sections)}\n"
        "  </body>\n"
        "</html>"
    )
