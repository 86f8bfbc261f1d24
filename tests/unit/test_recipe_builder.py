"""
Unit tests for recipe_builder.py

Tests the templated (non-AI) recipe: title, steps, dietary labels and pairing.
"""

import pytest

from data.models import Product
from recipe_builder import (
    assemble_recipe,
    dietary_labels,
    generate_recipe,
    recipe_title,
    FALLBACK_TITLE,
)


class TestTitle:

    def test_capitalizes_first_ingredient(self):
        assert recipe_title(["tomato", "basil"], "Salad") == "Salad • Tomato"

    def test_only_first_character_changes(self):
        assert recipe_title(["eVOO blend"], "Dip") == "Dip • EVOO blend"

    def test_no_ingredients(self):
        assert recipe_title([], "Main") == f"Main • {FALLBACK_TITLE}"
        assert FALLBACK_TITLE == "Chef's Choice"


class TestDietaryLabels:

    @pytest.mark.parametrize("selection", ["None", "none", "", None])
    def test_no_restriction(self, selection):
        assert dietary_labels(selection) == []

    def test_single_label(self):
        assert dietary_labels("Vegan") == ["Vegan"]


class TestGenerateRecipe:

    def test_four_fixed_steps(self):
        recipe = generate_recipe(["tomato", "basil"], [], "Salad")

        assert len(recipe.steps) == 4
        assert recipe.steps[0].startswith("Prep:")
        assert "within dietary rules" in recipe.steps[1]
        assert recipe.steps[2] == "Cook: add main ingredients (tomato, basil) and bring to doneness."
        assert recipe.steps[3].startswith("Finish:")

    def test_dietary_label_not_interpolated(self):
        recipe = generate_recipe(["tomato"], ["Keto"], "Main")
        assert not any("Keto" in step for step in recipe.steps)
        assert recipe.dietary == ["Keto"]

    def test_ingredients_keep_chosen_order(self):
        recipe = generate_recipe(["zucchini", "apple", "mint"], [], "Side")
        assert recipe.ingredients == ["zucchini", "apple", "mint"]

    def test_no_pairing_yet(self):
        assert generate_recipe(["tomato"], [], "Main").pairing is None

    def test_same_inputs_same_recipe(self):
        a = generate_recipe(["tomato", "basil"], ["Vegan"], "Salad")
        b = generate_recipe(["tomato", "basil"], ["Vegan"], "Salad")
        assert a == b


class TestAssembleRecipe:

    def test_full_recipe(self, sample_products):
        recipe = assemble_recipe(["tomato", "basil"], "Vegan", "Salad", sample_products)

        assert recipe.title == "Salad • Tomato"
        assert recipe.dish_type == "Salad"
        assert recipe.dietary == ["Vegan"]
        assert recipe.pairing.name == "Sea Salt"

    def test_none_dietary_is_empty(self, sample_products):
        recipe = assemble_recipe(["Basil"], "None", "Main", sample_products)
        assert recipe.dietary == []

    def test_pairing_never_an_ingredient(self, sample_products):
        names = [p.name for p in sample_products]
        # Use every prefix of the catalog as the ingredient list
        for n in range(len(names) + 1):
            recipe = assemble_recipe(names[:n], "None", "Main", sample_products)
            if recipe.pairing is not None:
                assert not recipe.uses(recipe.pairing.name)

    def test_pairing_absent_when_everything_used(self, sample_products):
        names = [p.name.upper() for p in sample_products]
        recipe = assemble_recipe(names, "None", "Main", sample_products)
        assert recipe.pairing is None

    def test_to_dict_shape(self, sample_products):
        data = assemble_recipe(["Basil"], "None", "Soup", sample_products).to_dict()

        assert set(data) == {"title", "ingredients", "steps", "dietary", "dishType", "pairing"}
        assert data["dishType"] == "Soup"
        assert data["pairing"]["name"] == "Sea Salt"
        assert data["pairing"]["prices"] == [6.5]

    def test_pairing_is_catalog_reference(self):
        oil = Product(id="9", name="Chili Oil", category="Finishing Oil")
        recipe = assemble_recipe(["rice"], "None", "Main", [oil])
        assert recipe.pairing is oil
