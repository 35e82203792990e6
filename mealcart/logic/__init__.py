"""Core business logic layer.

Subpackages:
- ingredients: fraction, unit and store normalization plus the ingredient line parser
- importing: recipe extraction strategies (JSON-LD, site adapters, heuristic) and candidate scoring
- shopping: week plan to store-grouped grocery lists and their text/HTML renderings

Nothing in here touches the network or the filesystem.
"""
__all__ = ["ingredients", "importing", "shopping"]
