from __future__ import annotations
from typing import Iterable
from renovation_planner.derive import group_suggestions
from renovation_planner.models import ProductSuggestion
from renovation_planner.store import ItemStore


def format_money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def format_shopping_list(store: ItemStore, currency: str) -> str:
    lines: list[str] = ["Renovation shopping list", ""]
    if not store.all_items():
        lines.append("The list is empty.")
        return "\n".join(lines)

    for group in store.categorized_items():
        lines.append(f"### {group.category_name} ###")
        for index, item in enumerate(group.items, start=1):
            marker = " (purchased)" if item.purchased else ""
            lines.append(f"{index}. {item.name}{marker}")
            lines.append(f"   Quantity: {item.quantity:g} {item.unit}")
            lines.append(f"   Price per unit: {format_money(item.price_per_unit, currency)}")
            lines.append(f"   Total: {format_money(item.total_cost, currency)}")
        lines.append("")

    totals = store.purchase_totals()
    lines.append("-" * 35)
    if totals.to_buy_count:
        lines.append(f"Total to buy: {format_money(totals.to_buy, currency)}")
    if totals.purchased_count:
        lines.append(f"Total purchased: {format_money(totals.purchased, currency)}")
    lines.append(f"Estimated total (all items): {format_money(store.total_budget(), currency)}")
    lines.append(f"My budget: {format_money(store.user_budget, currency)}")
    lines.append(f"Difference (budget - total): {format_money(store.budget_difference(), currency)}")
    return "\n".join(lines)


def format_suggestions(suggestions: Iterable[ProductSuggestion], currency: str) -> str:
    groups = group_suggestions(suggestions)
    if not groups:
        return "No shopping suggestions generated."

    lines: list[str] = ["Suggested products", ""]
    for store_group in groups:
        lines.append(f"--- Store: {store_group.store_name} ---")
        for category in store_group.categories:
            lines.append(f"  ### {category.category_name} ###")
            for product in category.products:
                lines.append(f"  - {product.product_name}")
                lines.append(f"    Price: {format_money(product.suggested_price, currency)}")
                lines.append(f"    For: {product.original_shopping_item_name}")
                lines.append(f"    Link: {product.web_shop_link}")
        lines.append("")
    return "\n".join(lines).strip()
