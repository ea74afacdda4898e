"""Pure views computed from a flat collection of shopping items.

Nothing here mutates its input. ``ItemStore`` calls these on read and caches the
result until the next mutation.
"""
from __future__ import annotations
import unicodedata
from collections import defaultdict
from typing import Iterable, Sequence
from renovation_planner.models import (
    DEFAULT_CATEGORY,
    DEFAULT_STORE,
    CategorizedGroup,
    CategoryCost,
    ProductSuggestion,
    PurchaseTotals,
    ShoppingItem,
    StoreGroup,
    SuggestionCategory,
    or_default,
)


def collation_key(text: str) -> tuple[str, str]:
    """Sort key that ignores case and accents, falling back to the raw text on ties."""
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, text


def category_of(item: ShoppingItem) -> str:
    return or_default(item.category, DEFAULT_CATEGORY)


def categorized_items(items: Iterable[ShoppingItem]) -> tuple[CategorizedGroup, ...]:
    by_category: dict[str, list[ShoppingItem]] = defaultdict(list)
    for item in items:
        by_category[category_of(item)].append(item)

    return tuple(
        CategorizedGroup(
            category_name=name,
            items=tuple(sorted(by_category[name], key=lambda i: collation_key(i.name))),
        )
        for name in sorted(by_category, key=collation_key)
    )


def total_budget(items: Iterable[ShoppingItem]) -> float:
    return sum((item.total_cost for item in items), 0.0)


def budget_difference(user_budget: float, items: Iterable[ShoppingItem]) -> float:
    return user_budget - total_budget(items)


def category_costs(items: Iterable[ShoppingItem]) -> tuple[CategoryCost, ...]:
    totals: dict[str, float] = defaultdict(float)
    for item in items:
        totals[category_of(item)] += item.total_cost
    return tuple(
        CategoryCost(category=name, total=totals[name])
        for name in sorted(totals, key=collation_key)
    )


def purchase_totals(items: Sequence[ShoppingItem]) -> PurchaseTotals:
    bought = [i for i in items if i.purchased]
    pending = [i for i in items if not i.purchased]
    return PurchaseTotals(
        to_buy=total_budget(pending),
        purchased=total_budget(bought),
        to_buy_count=len(pending),
        purchased_count=len(bought),
    )


def group_suggestions(suggestions: Iterable[ProductSuggestion]) -> tuple[StoreGroup, ...]:
    """Group suggestions by store, then by category, everything sorted by name."""
    stores: dict[str, dict[str, list[ProductSuggestion]]] = defaultdict(lambda: defaultdict(list))
    for suggestion in suggestions:
        store = or_default(suggestion.store_name, DEFAULT_STORE)
        category = or_default(suggestion.category, DEFAULT_CATEGORY)
        stores[store][category].append(suggestion)

    groups = []
    for store in sorted(stores, key=collation_key):
        categories = stores[store]
        groups.append(
            StoreGroup(
                store_name=store,
                categories=tuple(
                    SuggestionCategory(
                        category_name=category,
                        products=tuple(
                            sorted(categories[category], key=lambda p: collation_key(p.product_name))
                        ),
                    )
                    for category in sorted(categories, key=collation_key)
                ),
            )
        )
    return tuple(groups)
