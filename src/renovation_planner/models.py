from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_UNIT = "pcs"
DEFAULT_STORE = "Other stores"


def or_default(value: Optional[str], default: str) -> str:
    """Return the trimmed value, or ``default`` when it is missing or blank."""
    value = (value or "").strip()
    return value or default


class ItemDraft(BaseModel):
    """A shopping item before the store has assigned it an id."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, allow_inf_nan=False)

    name: str = Field(min_length=1)
    category: str = DEFAULT_CATEGORY
    quantity: float = Field(gt=0)
    unit: str = DEFAULT_UNIT
    price_per_unit: float = Field(ge=0)
    purchased: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Optional[str]) -> str:
        return or_default(v, DEFAULT_CATEGORY)

    @field_validator("unit", mode="before")
    @classmethod
    def default_unit(cls, v: Optional[str]) -> str:
        return or_default(v, DEFAULT_UNIT)


class ShoppingItem(ItemDraft):
    id: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_cost(self) -> float:
        return self.quantity * self.price_per_unit


class CategorizedGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_name: str
    items: tuple[ShoppingItem, ...]


class CategoryCost(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    total: float


class PurchaseTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    to_buy: float = 0.0
    purchased: float = 0.0
    to_buy_count: int = 0
    purchased_count: int = 0


class GeneratedMaterial(BaseModel):
    """One material entry as returned by the model (camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        allow_inf_nan=False,
    )

    name: str = Field(min_length=1)
    category: Optional[str] = None
    quantity: float = Field(gt=0)
    unit: Optional[str] = None
    estimated_price_per_unit: float = Field(ge=0)

    def to_draft(self) -> ItemDraft:
        return ItemDraft(
            name=self.name,
            category=self.category,
            quantity=self.quantity,
            unit=self.unit,
            price_per_unit=self.estimated_price_per_unit,
        )


class ProductSuggestion(BaseModel):
    """A concrete purchasable product proposed against a shopping item."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
    )

    product_name: str
    suggested_price: float = Field(ge=0)
    web_shop_link: str
    category: str = DEFAULT_CATEGORY
    store_name: str = DEFAULT_STORE
    original_shopping_item_name: str

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Optional[str]) -> str:
        return or_default(v, DEFAULT_CATEGORY)

    @field_validator("store_name", mode="before")
    @classmethod
    def default_store(cls, v: Optional[str]) -> str:
        return or_default(v, DEFAULT_STORE)


class SuggestionCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_name: str
    products: tuple[ProductSuggestion, ...]


class StoreGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    store_name: str
    categories: tuple[SuggestionCategory, ...]
