"""Keyword classifier assigning a Category to a free-text flavor name.

Rules are checked in order and the first match wins, so a name containing both
a cake keyword and a mix-in keyword ("Birthday Cake Remix" style) is a Cake.
"""
from typing import Tuple

from flavorchart.domain.Flavor import Category, DEFAULT_CATEGORY

__all__ = ["CATEGORY_RULES", "classify"]

MIX_IN_KEYWORDS: Tuple[str, ...] = (
    "cookies", "cookie", "sprinkles", "chips",
    "nuts", "almonds", "walnuts", "pecans", "cashews", "pistach", "peanuts",
    "m&m", "oreo",
    "fudge", "ganache", "caramel", "marshmallow", "whipped", "topping",
)

CATEGORY_RULES: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.ICE_CREAM, ("ice cream", "sorbet", "frozen dessert")),
    (Category.CAKE, ("cake", "brownie", "cupcake", "muffin", "pie")),
    (Category.CONE_OR_BOWL, ("cone", "waffle", "bowl")),
    (Category.MIX_IN, MIX_IN_KEYWORDS),
)


def classify(name) -> Category:
    """Return the category for a flavor name (Mix-In when nothing matches)."""
    text = name.lower() if isinstance(name, str) else ""
    for category, keywords in CATEGORY_RULES:
        if any(k in text for k in keywords):
            return category
    return DEFAULT_CATEGORY
