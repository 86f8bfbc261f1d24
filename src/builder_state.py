"""
Recipe builder state as an immutable record with pure transitions.

Every user action maps to one method that returns a new BuilderState:
- with_catalog: an upload replaced the catalog
- with_search / show_more: the product list view changed
- toggle: an ingredient was chosen or un-chosen
- with_dietary / with_dish_type: an option was picked
- build: a recipe was generated and prepended to the history

Key invariants:
- The catalog is replaced wholesale, never merged
- Chosen names keep insertion order and flow unchanged into recipes
- build() is a no-op unless something is chosen and the catalog has
  available products
"""

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from data.models import Product, Recipe
from recipe_builder import NO_RESTRICTION, DEFAULT_DISH_TYPE, assemble_recipe

PAGE_SIZE = 5


@dataclass(frozen=True)
class BuilderState:
    """Everything the recipe builder screen shows, as one snapshot."""
    catalog: Tuple[Product, ...] = ()
    search: str = ""
    visible_count: int = PAGE_SIZE
    chosen: Tuple[str, ...] = ()
    dietary: str = NO_RESTRICTION
    dish_type: str = DEFAULT_DISH_TYPE
    recipes: Tuple[Recipe, ...] = ()  # Most recent first

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def available_products(self) -> Tuple[Product, ...]:
        return tuple(p for p in self.catalog if p.is_available)

    @property
    def filtered_products(self) -> Tuple[Product, ...]:
        """Available products whose name contains the search term (name only)."""
        term = self.search.strip().lower()
        if not term:
            return self.available_products
        return tuple(p for p in self.available_products if term in p.name.lower())

    @property
    def visible_products(self) -> Tuple[Product, ...]:
        return self.filtered_products[:self.visible_count]

    @property
    def hidden_count(self) -> int:
        """How many filtered products the "show more" button would still reveal."""
        return max(0, len(self.filtered_products) - self.visible_count)

    @property
    def can_build(self) -> bool:
        return bool(self.chosen) and bool(self.available_products)

    def is_chosen(self, name: str) -> bool:
        return name in self.chosen

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def with_catalog(self, products: Iterable[Product]) -> "BuilderState":
        return replace(self, catalog=tuple(products))

    def with_search(self, term: str) -> "BuilderState":
        return replace(self, search=term or "")

    def show_more(self, step: int = PAGE_SIZE) -> "BuilderState":
        return replace(self, visible_count=self.visible_count + step)

    def toggle(self, name: str) -> "BuilderState":
        """Choose ``name``, or un-choose it if it is already chosen."""
        if name in self.chosen:
            return replace(self, chosen=tuple(n for n in self.chosen if n != name))
        return replace(self, chosen=self.chosen + (name,))

    def with_dietary(self, label: str) -> "BuilderState":
        return replace(self, dietary=label)

    def with_dish_type(self, label: str) -> "BuilderState":
        return replace(self, dish_type=label)

    def build(self) -> "BuilderState":
        """Generate a recipe from the current selections and prepend it."""
        if not self.can_build:
            return self

        recipe = assemble_recipe(
            ingredients=self.chosen,
            dietary_selection=self.dietary,
            dish_type=self.dish_type,
            catalog=self.available_products,
        )
        return replace(self, recipes=(recipe,) + self.recipes)

    @property
    def latest_recipe(self):
        return self.recipes[0] if self.recipes else None
