"""
Data models for the Store-Aware Recipe Builder.

These models define the core entities used throughout the system:
- Product: One row of an uploaded store catalog
- Recipe: A templated recipe built from chosen catalog ingredients

Both are read-only snapshots. A new catalog replaces the old one wholesale,
and recipes keep whatever pairing they were built with.
"""

from dataclasses import dataclass
from typing import List, Optional, Dict


@dataclass(frozen=True)
class Product:
    """One catalog item.

    Optional fields keep the absent/empty distinction: ``prices is None``
    means the source had no usable price, which is different from an
    empty list.
    """
    id: str
    name: str
    category: str = ""
    prices: Optional[List[float]] = None
    available: bool = True
    tags: Optional[List[str]] = None  # Reserved for richer catalogs
    sizes: Optional[List[str]] = None  # e.g. "200ml", "375ml"
    description: Optional[str] = None

    @property
    def is_available(self) -> bool:
        """Only an explicit ``available=False`` hides a product."""
        return self.available is not False

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization (absent fields omitted)."""
        data = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "available": self.available,
        }
        if self.prices is not None:
            data["prices"] = list(self.prices)
        if self.tags is not None:
            data["tags"] = list(self.tags)
        if self.sizes is not None:
            data["sizes"] = list(self.sizes)
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Product":
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data.get("category", ""),
            prices=data.get("prices"),
            available=data.get("available", True),
            tags=data.get("tags"),
            sizes=data.get("sizes"),
            description=data.get("description"),
        )

    def __str__(self) -> str:
        if self.category:
            return f"{self.name} ({self.category})"
        return self.name


@dataclass(frozen=True)
class Recipe:
    """Templated recipe generated from chosen catalog ingredients."""

    title: str
    ingredients: List[str]  # As chosen, never re-sorted
    steps: List[str]
    dietary: List[str]  # Empty when no restriction was selected
    dish_type: str
    pairing: Optional[Product] = None  # Reference into the catalog it was built from

    def uses(self, name: str) -> bool:
        """True if ``name`` matches a recipe ingredient, ignoring case."""
        target = name.lower()
        return any(ing.lower() == target for ing in self.ingredients)

    def with_pairing(self, pairing: Optional[Product]) -> "Recipe":
        """Return a copy carrying ``pairing``."""
        return Recipe(
            title=self.title,
            ingredients=self.ingredients,
            steps=self.steps,
            dietary=self.dietary,
            dish_type=self.dish_type,
            pairing=pairing,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "steps": list(self.steps),
            "dietary": list(self.dietary),
            "dishType": self.dish_type,
            "pairing": self.pairing.to_dict() if self.pairing else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Recipe":
        """Create from dictionary."""
        pairing = data.get("pairing")
        return cls(
            title=data["title"],
            ingredients=list(data.get("ingredients", [])),
            steps=list(data.get("steps", [])),
            dietary=list(data.get("dietary", [])),
            dish_type=data.get("dishType", data.get("dish_type", "")),
            pairing=Product.from_dict(pairing) if pairing else None,
        )

    def __str__(self) -> str:
        return f"{self.title} ({len(self.ingredients)} ingredients)"
