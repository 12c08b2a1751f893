from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

ALL_CATEGORIES = "All"


class MenuVariant(BaseModel):
    """A purchasable size of a menu item with its own price."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique variant identifier")
    parent_item_id: str = Field(description="Menu item this variant belongs to")
    size_label: str = Field(description="Size/configuration label, e.g. 'Small'")
    unit_price: NonNegativeInt = Field(description="Price in the smallest currency unit")


class MenuItem(BaseModel):
    """A menu entry with one or more variants."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique menu item identifier")
    name: str = Field(description="Display name")
    category: str = Field(description="Category name")
    emoji: Optional[str] = Field(default=None, description="Icon shown on the menu grid")
    is_available: bool = Field(default=True, description="Whether the item can be sold")
    variants: List[MenuVariant] = Field(default_factory=list, description="Sizes and prices")


class Catalog(BaseModel):
    """Read-only menu catalog supplied to the cart."""
    categories: List[str] = Field(default_factory=list, description="Category names, catalog order")
    items: List[MenuItem] = Field(default_factory=list, description="Sellable menu items")

    def categories_with_all(self) -> List[str]:
        return [ALL_CATEGORIES, *self.categories]

    def filter_items(self, category: str = ALL_CATEGORIES, search: str = "") -> List[MenuItem]:
        """Items matching the category (``All`` matches every one) and a name substring."""
        term = (search or "").strip().lower()
        return [
            item for item in self.items
            if (category == ALL_CATEGORIES or item.category == category)
            and term in item.name.lower()
        ]

    def find_variant(self, variant_id: str) -> Optional[tuple[MenuItem, MenuVariant]]:
        for item in self.items:
            for variant in item.variants:
                if variant.id == variant_id:
                    return item, variant
        return None
