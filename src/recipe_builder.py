"""
Build a templated recipe from chosen catalog ingredients.

No generation service is called: the title and the four steps are fixed
templates filled in from the inputs, so the same inputs always produce the
same recipe.
"""

import logging
from typing import List, Optional, Sequence

from data.models import Product, Recipe
from pairing import pick_pairing

logger = logging.getLogger(__name__)

NO_RESTRICTION = "None"

DIETARY_OPTIONS = [
    NO_RESTRICTION, "Vegan", "Vegetarian", "Gluten-Free", "Dairy-Free",
    "Keto", "Paleo", "Low-Sodium", "Nut-Free",
]
DISH_TYPES = [
    "Appetizer", "Main", "Side", "Salad", "Soup",
    "Dessert", "Breakfast", "Marinade", "Dip",
]

DEFAULT_DISH_TYPE = "Main"
FALLBACK_TITLE = "Chef's Choice"


def dietary_labels(selection: Optional[str]) -> List[str]:
    """Map a dietary selection to the recipe's label list ([] for no restriction)."""
    if not selection or selection.strip().lower() == NO_RESTRICTION.lower():
        return []
    return [selection]


def recipe_title(ingredients: Sequence[str], dish_type: str) -> str:
    """``"{dish_type} • {First ingredient}"``, first character uppercased only."""
    if ingredients and ingredients[0]:
        first = ingredients[0]
        suffix = first[0].upper() + first[1:]
    else:
        suffix = FALLBACK_TITLE
    return f"{dish_type} • {suffix}"


def recipe_steps(ingredients: Sequence[str]) -> List[str]:
    return [
        "Prep: wash, chop, and measure your ingredients.",
        "Base: warm a pan and build aromatics within dietary rules.",
        f"Cook: add main ingredients ({', '.join(ingredients)}) and bring to doneness.",
        "Finish: season thoughtfully and plate with a garnish.",
    ]


def generate_recipe(ingredients: Sequence[str], dietary: List[str], dish_type: str) -> Recipe:
    """
    Fill the recipe template. The result has no pairing yet.

    Args:
        ingredients: Chosen ingredient names, in the order they were chosen
        dietary: Dietary labels in effect (possibly empty)
        dish_type: Selected dish type label

    Returns:
        Recipe with title, steps, ingredients, dietary and dish type set
    """
    chosen = list(ingredients)
    return Recipe(
        title=recipe_title(chosen, dish_type),
        ingredients=chosen,
        steps=recipe_steps(chosen),
        dietary=list(dietary),
        dish_type=dish_type,
        pairing=None,
    )


def assemble_recipe(
    ingredients: Sequence[str],
    dietary_selection: Optional[str],
    dish_type: str,
    catalog: Sequence[Product],
) -> Recipe:
    """
    Build a complete recipe, pairing included.

    Callers check the preconditions (at least one ingredient, non-empty
    catalog) before calling; see ``BuilderState.can_build``.
    """
    recipe = generate_recipe(ingredients, dietary_labels(dietary_selection), dish_type)
    pairing = pick_pairing(catalog, recipe.ingredients)
    logger.info(
        f"Assembled recipe '{recipe.title}' "
        f"(pairing={pairing.name if pairing else None})"
    )
    return recipe.with_pairing(pairing)
