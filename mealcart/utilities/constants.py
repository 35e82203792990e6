"""Static lookup tables shared by the parser, the importer and the grocery engine."""
import re
from types import MappingProxyType
from typing import Final, Mapping, Pattern

DAYS: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MEAL_SLOTS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
DAY_MODES: Final[tuple[str, ...]] = ("planned", "leftovers", "eat-out", "skip")
MEAL_MODES: Final[tuple[str, ...]] = ("recipe", "leftovers", "eat-out", "skip")

UNASSIGNED: Final[str] = "Unassigned"
DEFAULT_STORES: Final[tuple[str, ...]] = ("Target", "Sprouts", "Aldi", "Trader Joe's")
CHECKLIST_STORE: Final[str] = "Trader Joe's"

DEFAULT_SERVINGS: Final[int] = 4
DEFAULT_UNIT: Final[str] = "each"
DEFAULT_MEAL_TYPE: Final[str] = "dinner"

# Vulgar fraction glyphs -> ASCII fractions
UNICODE_FRACTIONS: Final[Mapping[str, str]] = MappingProxyType({
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅐": "1/7",
    "⅑": "1/9",
    "⅒": "1/10",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
})

UNIT_SYNONYMS: Final[Mapping[str, str]] = MappingProxyType({
    "c": "cup",
    "cups": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "tb": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsps": "tsp",
    "ts": "tsp",
    "ounce": "oz",
    "ounces": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "pt": "pint",
    "pints": "pint",
    "qt": "quart",
    "quarts": "quart",
    "gal": "gallon",
    "gallons": "gallon",
    "pinches": "pinch",
    "dashes": "dash",
    "sticks": "stick",
    "cloves": "clove",
    "slices": "slice",
    "pieces": "piece",
    "pc": "piece",
    "pcs": "piece",
    "bunches": "bunch",
    "cans": "can",
    "jars": "jar",
    "packages": "package",
    "pkg": "package",
    "packs": "pack",
    "bags": "bag",
    "heads": "head",
    "sprigs": "sprig",
    "handfuls": "handful",
})

KNOWN_UNITS: Final[frozenset[str]] = frozenset({
    "cup", "cups", "c",
    "tablespoon", "tablespoons", "tbsp", "tbsps", "tbs", "tb",
    "teaspoon", "teaspoons", "tsp", "tsps", "ts",
    "ounce", "ounces", "oz",
    "pound", "pounds", "lb", "lbs",
    "gram", "grams", "g",
    "kilogram", "kilograms", "kg",
    "milliliter", "milliliters", "millilitre", "millilitres", "ml",
    "liter", "liters", "litre", "litres", "l",
    "pint", "pints", "pt",
    "quart", "quarts", "qt",
    "gallon", "gallons", "gal",
    "pinch", "pinches",
    "dash", "dashes",
    "stick", "sticks",
    "clove", "cloves",
    "slice", "slices",
    "piece", "pieces", "pc", "pcs",
    "bunch", "bunches",
    "can", "cans",
    "jar", "jars",
    "package", "packages", "pkg",
    "pack", "packs",
    "bag", "bags",
    "head", "heads",
    "sprig", "sprigs",
    "handful", "handfuls",
    "whole",
    "small", "medium", "large",
})

# Commerce / UI copy that ends up in pasted ingredient blocks
NOISE_PATTERNS: Final[tuple[Pattern[str], ...]] = tuple(re.compile(p, re.I) for p in (
    r"^add\s+to\s+cart$",
    r"^shop(\s+now)?$",
    r"^sold\s+out$",
    r"^select\s+(size|options?)$",
    r"^buy\s+now$",
    r"^add\s+to\s+(list|bag|basket)$",
    r"^(in|out\s+of)\s+stock$",
    r"^(save|share|print|pin)(\s+recipe)?$",
    r"^advertisement$",
    r"^sponsored$",
    r"^subscribe$",
    r"^sign\s+up$",
    r"^log\s*in$",
    r"^jump\s+to\s+recipe$",
    r"^rate\s+this\s+recipe$",
    r"^prep\s+time\b",
    r"^cook\s+time\b",
    r"^total\s+time\b",
    r"^servings?:?$",
    r"^yield:?$",
    r"^\d+\s*(cal|calories|kcal)\b",
))

SECTION_HEADING_WORDS: Final[frozenset[str]] = frozenset({
    "ingredients", "ingredient", "instructions", "instruction", "directions",
    "direction", "method", "steps", "step", "preparation", "recipe",
    "nutrition", "nutritionfacts", "nutritioninfo", "nutritioninformation", "notes",
    "whatyouneed", "deselectall",
})

INGREDIENT_HEADINGS: Final[tuple[str, ...]] = ("ingredients", "what you need")
STEP_HEADINGS: Final[tuple[str, ...]] = (
    "instructions", "directions", "method", "preparation", "steps",
)
STOP_HEADINGS: Final[tuple[str, ...]] = (
    "nutrition", "notes", "note", "video", "related", "comments", "reviews", "tags",
    "equipment", "tips", "faq", "author", "more recipes", "you may also like",
)

MEAL_TYPE_KEYWORDS: Final[tuple[tuple[str, Pattern[str]], ...]] = (
    ("breakfast", re.compile(r"\b(breakfast|brunch|pancakes?|oatmeal|frittata|granola)\b", re.I)),
    ("lunch", re.compile(r"\b(lunch|sandwich(es)?|wraps?|bento|grain bowl)\b", re.I)),
    ("dinner", re.compile(r"\b(dinner|supper|entree|main course|casserole|roast)\b", re.I)),
)
