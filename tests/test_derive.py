from renovation_planner.derive import (
    budget_difference, categorized_items, category_costs, collation_key,
    group_suggestions, purchase_totals, total_budget,
)
from renovation_planner.models import DEFAULT_STORE, ProductSuggestion, ShoppingItem


def _item(name: str, category: str, quantity: float = 1, price: float = 10, purchased: bool = False) -> ShoppingItem:
    return ShoppingItem(
        id=name, name=name, category=category, quantity=quantity,
        price_per_unit=price, purchased=purchased,
    )


def _suggestion(product: str, store: str, category: str) -> ProductSuggestion:
    return ProductSuggestion(
        product_name=product, suggested_price=1, web_shop_link="https://shop.example",
        category=category, store_name=store, original_shopping_item_name=product,
    )


def test_collation_key_ignores_case_and_accents():
    words = ["zid", "Čavli", "boja", "Ćuskija", "cement"]
    assert sorted(words, key=collation_key) == ["boja", "Čavli", "cement", "Ćuskija", "zid"]


def test_categorized_items_groups_and_sorts():
    items = [
        _item("Tile", "Flooring"),
        _item("Paint", "Walls"),
        _item("Adhesive", "Flooring"),
        _item("primer", "Walls"),
    ]
    groups = categorized_items(items)
    assert [g.category_name for g in groups] == ["Flooring", "Walls"]
    assert [i.name for i in groups[0].items] == ["Adhesive", "Tile"]
    assert [i.name for i in groups[1].items] == ["Paint", "primer"]


def test_categorized_items_trims_category():
    groups = categorized_items([_item("Tile", "Flooring "), _item("Grout", "Flooring")])
    assert len(groups) == 1
    assert groups[0].category_name == "Flooring"


def test_categorized_items_is_idempotent():
    items = [_item("b", "Y"), _item("a", "X"), _item("c", "X")]
    assert categorized_items(items) == categorized_items(items)


def test_totals_and_difference():
    items = [_item("Tile", "Flooring", 10, 12), _item("Paint", "Walls", 5, 20)]
    assert total_budget(items) == 220
    assert budget_difference(300, items) == 80
    assert budget_difference(0, []) == 0


def test_category_costs_sum_and_sort():
    items = [
        _item("Paint", "Walls", 5, 20),
        _item("Tile", "Flooring", 10, 12),
        _item("Primer", "Walls", 1, 15),
    ]
    costs = category_costs(items)
    assert [(c.category, c.total) for c in costs] == [("Flooring", 120), ("Walls", 115)]


def test_purchase_totals_split():
    items = [_item("Tile", "F", 10, 12, purchased=True), _item("Paint", "W", 5, 20)]
    totals = purchase_totals(items)
    assert totals.purchased == 120
    assert totals.to_buy == 100
    assert (totals.purchased_count, totals.to_buy_count) == (1, 1)


def test_group_suggestions_by_store_then_category():
    suggestions = [
        _suggestion("Wall paint", "Shop B", "Paint"),
        _suggestion("Tile adhesive", "Shop A", "Flooring"),
        _suggestion("Acrylic paint", "Shop B", "Paint"),
        _suggestion("Roller", "", "Tools"),
    ]
    groups = group_suggestions(suggestions)
    assert [g.store_name for g in groups] == [DEFAULT_STORE, "Shop A", "Shop B"]
    shop_b = groups[2]
    assert [c.category_name for c in shop_b.categories] == ["Paint"]
    assert [p.product_name for p in shop_b.categories[0].products] == ["Acrylic paint", "Wall paint"]


def test_group_suggestions_empty():
    assert group_suggestions([]) == ()
