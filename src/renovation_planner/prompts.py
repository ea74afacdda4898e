from __future__ import annotations
import json
from typing import Optional, Sequence
from renovation_planner.config import Config
from renovation_planner.models import ProductSuggestion, ShoppingItem


def _trades(config: Config) -> str:
    return "\n".join(f"  - {t}" for t in config.expert_trades)


def materials_prompt(description: str, config: Config) -> str:
    return (
        "Generate a detailed list of materials needed to renovate an apartment "
        f'described as follows: "{description}".\n\n'
        "The list should cover flooring, wall finishes, paint, lighting and plumbing.\n"
        "For every material give the ideal quantity for a typical renovation of the stated size "
        "and style, the unit of measure (e.g. m2, litres, pcs, kg) and the estimated price per unit "
        f"in {config.currency} on the {config.market_region} market.\n"
        "If the description mentions specific brands or quality levels, take them into account.\n\n"
        "Consider the scope of work the following trades would be involved in:\n"
        f"{_trades(config)}\n\n"
        "Respond with a JSON array of objects with the keys "
        "name, category, quantity, unit and estimatedPricePerUnit."
    )


def analysis_prompt(description: str, config: Config) -> str:
    return (
        "Provide a comprehensive, detailed analysis of an apartment renovation project "
        f'described as follows: "{description}".\n'
        "Use the sections below with clear headings and bullet lists.\n\n"
        "### 1. Scope of work\n"
        "Define the goals and the scope of the renovation.\n\n"
        "### 2. Project analysis\n"
        "- Assessment of the current state and potential challenges.\n"
        "- Budget guidance, including a recommended contingency reserve.\n"
        "- A realistic timeline for each phase.\n"
        "- Functional and aesthetic considerations.\n\n"
        "### 3. Documents and permits\n"
        "List the permits and reports that may be required (building permit, structural report, "
        "energy certificate, consent of neighbours or the building).\n\n"
        "### 4. Required designs\n"
        "Describe which designs (architectural, interior, electrical, mechanical, water and drainage) "
        "may be needed and why.\n\n"
        "### 5. Phases of work\n"
        "- Dismantling and demolition.\n"
        "- Rough works (masonry, partition walls, installations).\n"
        "- Finishing works (plastering, skim coating, painting, floors, tiles, sanitary ware, lighting).\n"
        "- Fitting of custom furniture.\n"
        "- Final cleaning.\n\n"
        "### 6. Procurement advice\n"
        "- Planning purchases and comparing prices.\n"
        "- Keeping a reserve of material, in quantity and in money.\n"
        "- Delivery and storage logistics.\n\n"
        "### 7. Required trades and market prices\n"
        "For each trade below describe its key responsibilities and estimate current market prices "
        f"in {config.currency} in {config.market_region}, giving price ranges or billing methods "
        "(per m2, per hour, fixed price):\n"
        f"{_trades(config)}\n"
    )


def suggestions_prompt(items: Sequence[ShoppingItem], config: Config) -> str:
    listed = [
        {
            "name": item.name,
            "category": item.category,
            "quantity": item.quantity,
            "unit": item.unit,
            "estimatedPricePerUnit": item.price_per_unit,
        }
        for item in items
    ]
    return (
        "Based on the renovation shopping list below, suggest concrete products with estimated "
        f"prices in {config.currency} and links to web shops in {config.market_region} "
        "where they can be bought.\n"
        "Try to find suitable products for every item on the list.\n"
        "Organise the results by STORE NAME first and then by CATEGORY within each store.\n\n"
        "Items to find products for:\n"
        f"{json.dumps(listed, indent=2, ensure_ascii=False)}\n\n"
        "Respond with a JSON array where each object is one product suggestion with the keys "
        "productName, suggestedPrice, webShopLink, category, storeName and originalShoppingItemName."
    )


def brief_prompt(
    analysis: Optional[str],
    items: Sequence[ShoppingItem],
    suggestions: Sequence[ProductSuggestion],
) -> str:
    item_lines = "\n".join(f"- {i.name} ({i.quantity:g} {i.unit})" for i in items)
    product_lines = "\n".join(f"- {p.product_name} from {p.store_name}" for p in suggestions)
    return (
        "Act as an experienced apartment renovation project manager. "
        "You have received the following material prepared by an assistant:\n\n"
        "1. Detailed project analysis:\n"
        f"{analysis or 'Not generated.'}\n\n"
        "2. Material shopping list (summary):\n"
        f"{item_lines or 'Not generated.'}\n\n"
        "3. Product suggestions from stores:\n"
        f"{product_lines or 'Not generated.'}\n\n"
        "Review this critically and deliver a SHORT OPERATIONAL BRIEF for the apartment owner. "
        "Keep it concise, clear and action-oriented, with these points:\n"
        "- **Key findings:** the most important insights across all of the above.\n"
        "- **Priorities and next steps:** what the owner should do first "
        "(e.g. contact an architect, check the structure, collect quotes).\n"
        "- **Risks and warnings:** budget overruns, delays, hidden defects in older apartments.\n"
        "- **Recommendations:** practical advice for delivering the project successfully.\n\n"
        "Be direct and professional."
    )
