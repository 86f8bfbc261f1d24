"""
Pick one catalog product to suggest alongside a recipe.

Oils, vinegars and seasonings make the best add-on suggestions, so products
whose category mentions one of those win. Candidates are walked in catalog
order and each is tested against the whole priority list: the first product
matching any term wins, not the product matching the first term.
"""

from typing import Iterable, List, Optional

from data.models import Product

PAIRING_PRIORITY: List[str] = [
    "olive oil",
    "extra virgin",
    "gourmet oil",
    "balsamic",
    "vinegar",
    "spice",
    "seasoning",
    "salt",
    "sauce",
    "condiment",
    "finishing oil",
]


def _is_priority(product: Product) -> bool:
    category = (product.category or "").lower()
    return any(term in category for term in PAIRING_PRIORITY)


def pick_pairing(products: Iterable[Product], used_names: Iterable[str]) -> Optional[Product]:
    """
    Choose a pairing product.

    Args:
        products: Current catalog, in catalog order
        used_names: Ingredient names already in the recipe

    Returns:
        First available, unused product with a priority category; otherwise
        the first available, unused product; None when nothing is left.
    """
    used = {name.lower() for name in used_names}
    candidates = [
        p for p in products
        if p.is_available and p.name.lower() not in used
    ]

    for product in candidates:
        if _is_priority(product):
            return product

    return candidates[0] if candidates else None
