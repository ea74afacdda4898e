from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional
import click
from pydantic import ValidationError
from rich.bar import Bar
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table
from renovation_planner.config import Config
from renovation_planner.enrichment import EnrichmentClient
from renovation_planner.formatter import format_money, format_shopping_list, format_suggestions
from renovation_planner.llm import EnrichmentError, GenerativeClient
from renovation_planner.models import ItemDraft
from renovation_planner.store import ItemStore

console = Console()
err_console = Console(stderr=True)


@click.group()
def cli():
    """Renovation Planner: materials, costs and AI advice for your renovation."""
    pass


def _load_config() -> Config:
    try:
        return Config()
    except ValidationError:
        err_console.print("[red]Error:[/red] ANTHROPIC_API_KEY environment variable is not set.")
        raise SystemExit(1)


def _parse_items(ctx, param, values: tuple[str, ...]) -> list[ItemDraft]:
    drafts = []
    for raw in values:
        parts = [p.strip() for p in raw.split(",")]
        if len(parts) != 5 or not parts[0]:
            raise click.BadParameter(f"'{raw}' must look like name,category,quantity,unit,price")
        name, category, quantity, unit, price = parts
        try:
            drafts.append(
                ItemDraft(
                    name=name,
                    category=category,
                    quantity=float(quantity),
                    unit=unit,
                    price_per_unit=float(price),
                )
            )
        except ValueError as e:
            raise click.BadParameter(f"'{raw}': {e}")
    return drafts


def _report_errors(enrichment: EnrichmentClient) -> None:
    shown: list[EnrichmentError] = []

    def listener() -> None:
        failure = enrichment.failure
        if failure is not None and not any(f is failure for f in shown):
            shown.append(failure)
            err_console.print(f"[red]Error:[/red] {enrichment.error}")

    enrichment.subscribe(listener)


async def _run_plan(
    enrichment: EnrichmentClient, description: str, analysis: bool, suggest: bool, brief: bool
) -> bool:
    jobs = [enrichment.generate_materials(description)]
    if analysis:
        jobs.append(enrichment.generate_analysis(description))
    results = await asyncio.gather(*jobs)
    if not results[0]:
        return False
    if suggest:
        await enrichment.generate_suggestions()
    if brief:
        await enrichment.generate_brief()
    return True


def _items_table(store: ItemStore, currency: str) -> Table:
    table = Table(title="Shopping List")
    table.add_column("Category", style="cyan")
    table.add_column("Item")
    table.add_column("Quantity", justify="right")
    table.add_column("Unit price", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Bought", justify="center")

    for group in store.categorized_items():
        for item in group.items:
            table.add_row(
                group.category_name,
                item.name,
                f"{item.quantity:g} {item.unit}",
                format_money(item.price_per_unit, currency),
                format_money(item.total_cost, currency),
                "[green]✓[/green]" if item.purchased else "",
            )
    return table


def _cost_chart(store: ItemStore, currency: str) -> Table:
    costs = store.category_costs()
    peak = max((c.total for c in costs), default=0.0) or 1.0
    table = Table(title="Cost by Category", show_header=False, box=None)
    table.add_column("Category", style="cyan")
    table.add_column("Bar")
    table.add_column("Total", justify="right")
    for cost in costs:
        table.add_row(
            cost.category,
            Bar(size=peak, begin=0, end=cost.total, width=40, color="blue"),
            format_money(cost.total, currency),
        )
    return table


def _print_budget(store: ItemStore, currency: str) -> None:
    difference = store.budget_difference()
    colour = "green" if difference >= 0 else "red"
    console.print(f"Estimated total: [bold]{format_money(store.total_budget(), currency)}[/bold]")
    console.print(f"My budget: {format_money(store.user_budget, currency)}")
    console.print(f"Difference: [{colour}]{format_money(difference, currency)}[/{colour}]")


@cli.command()
@click.argument("description")
@click.option(
    "--budget", type=click.FloatRange(min=0), default=0.0, show_default=True,
    help="Your target budget for the renovation"
)
@click.option(
    "--item", "items", multiple=True, callback=_parse_items,
    help="Add an item by hand: name,category,quantity,unit,price (repeatable)"
)
@click.option("--analysis", is_flag=True, help="Also generate a detailed project analysis")
@click.option("--suggest", is_flag=True, help="Suggest concrete products from web shops")
@click.option("--brief", is_flag=True, help="Finish with an operational brief")
@click.option(
    "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Write the text export to this file"
)
def plan(
    description: str,
    budget: float,
    items: list[ItemDraft],
    analysis: bool,
    suggest: bool,
    brief: bool,
    output: Optional[Path],
):
    """Generate a material list for DESCRIPTION and summarise its costs."""
    config = _load_config()
    store = ItemStore()
    try:
        store.user_budget = budget
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--budget'")
    for draft in items:
        store.add_item(draft)

    enrichment = EnrichmentClient(store, GenerativeClient(config))
    _report_errors(enrichment)

    console.print("[dim]Generating material list...[/dim]")
    if not asyncio.run(_run_plan(enrichment, description, analysis, suggest, brief)):
        raise SystemExit(1)

    console.print(
        f"[green]✓[/green] Added [bold]{len(enrichment.generated_items)}[/bold] generated items.\n"
    )
    console.print(_items_table(store, config.currency))
    console.print(_cost_chart(store, config.currency))
    _print_budget(store, config.currency)

    sections = [format_shopping_list(store, config.currency)]
    if enrichment.analysis:
        console.print(Markdown(enrichment.analysis))
        sections.append(enrichment.analysis)
    if enrichment.suggestions:
        suggestions_text = format_suggestions(enrichment.suggestions, config.currency)
        console.print(f"\n{suggestions_text}", markup=False)
        sections.append(suggestions_text)
    if enrichment.brief:
        console.print(Markdown(enrichment.brief))
        sections.append(enrichment.brief)

    if output is not None:
        output.write_text("\n\n".join(sections) + "\n")
        console.print(f"\n[dim]Saved to {output}[/dim]")


@cli.command()
@click.argument("description")
@click.option(
    "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Write the analysis to this file instead of printing it"
)
def analyze(description: str, output: Optional[Path]):
    """Generate a detailed analysis of the renovation described by DESCRIPTION."""
    config = _load_config()
    enrichment = EnrichmentClient(ItemStore(), GenerativeClient(config))
    _report_errors(enrichment)

    console.print("[dim]Generating detailed analysis...[/dim]")
    if not asyncio.run(enrichment.generate_analysis(description)):
        raise SystemExit(1)

    if output is not None:
        output.write_text(enrichment.analysis + "\n")
        console.print(f"[green]✓[/green] Analysis saved to {output}")
    else:
        console.print(Markdown(enrichment.analysis))
