import random
import pytest
from pydantic import ValidationError
from renovation_planner.models import DEFAULT_CATEGORY, DEFAULT_UNIT, ItemDraft
from renovation_planner.store import ItemStore


def _draft(name: str = "Tile", category: str = "Flooring", quantity: float = 10,
           unit: str = "m2", price: float = 12, purchased: bool = False) -> ItemDraft:
    return ItemDraft(
        name=name, category=category, quantity=quantity, unit=unit,
        price_per_unit=price, purchased=purchased,
    )


@pytest.fixture
def store():
    return ItemStore()


def test_add_item_assigns_id_and_total(store):
    item = store.add_item(_draft())
    assert item.id
    assert item.total_cost == 120
    assert store.all_items() == (item,)


def test_add_item_costs_show_in_category_costs(store):
    store.add_item(_draft())
    costs = store.category_costs()
    assert [(c.category, c.total) for c in costs] == [("Flooring", 120)]


def test_add_item_blank_category_gets_own_group(store):
    store.add_item(_draft(name="Screws", category=""))
    store.add_item(_draft(name="Tile"))
    groups = store.categorized_items()
    assert [g.category_name for g in groups] == ["Flooring", DEFAULT_CATEGORY]
    assert groups[1].items[0].name == "Screws"


def test_ids_are_unique(store):
    ids = {store.add_item(_draft(name=f"item {n}")).id for n in range(50)}
    assert len(ids) == 50


def test_items_keep_insertion_order(store):
    for name in ["c", "a", "b"]:
        store.add_item(_draft(name=name))
    assert [i.name for i in store.all_items()] == ["c", "a", "b"]


def test_add_items_appends_batch(store):
    first = store.add_item(_draft(name="Existing"))
    batch = store.add_items([_draft(name="Paint"), _draft(name="Primer")])
    assert len(batch) == 2
    assert store.all_items() == (first, *batch)


def test_update_quantity_recomputes_total(store):
    item = store.add_item(_draft())
    store.update_item(item.id, quantity=3)
    updated = store.get(item.id)
    assert updated.total_cost == 36
    assert updated.id == item.id


def test_update_price_recomputes_total(store):
    item = store.add_item(_draft())
    store.update_item(item.id, price_per_unit=2.5)
    assert store.get(item.id).total_cost == 25


def test_update_unknown_id_is_noop(store):
    store.add_item(_draft())
    before = store.all_items()
    revision = store.revision
    store.update_item("missing", quantity=99)
    assert store.all_items() == before
    assert store.revision == revision


def test_update_blank_category_and_unit_reapply_defaults(store):
    item = store.add_item(_draft())
    store.update_item(item.id, category="", unit="")
    updated = store.get(item.id)
    assert updated.category == DEFAULT_CATEGORY
    assert updated.unit == DEFAULT_UNIT


def test_update_toggles_purchased(store):
    item = store.add_item(_draft())
    store.update_item(item.id, purchased=True)
    assert store.get(item.id).purchased is True
    assert store.purchase_totals().purchased == 120


def test_update_refuses_total_cost_and_id(store):
    item = store.add_item(_draft())
    with pytest.raises(ValueError, match="total_cost"):
        store.update_item(item.id, total_cost=1)
    with pytest.raises(ValueError, match="id"):
        store.update_item(item.id, id="other")


def test_update_rejects_unknown_field(store):
    item = store.add_item(_draft())
    with pytest.raises(ValueError, match="colour"):
        store.update_item(item.id, colour="red")


def test_update_validates_quantity(store):
    item = store.add_item(_draft())
    with pytest.raises(ValidationError):
        store.update_item(item.id, quantity=0)
    assert store.get(item.id).quantity == 10


def test_update_unknown_id_ignores_field_names(store):
    store.add_item(_draft())
    revision = store.revision
    store.update_item("missing", colour="red")
    assert store.revision == revision


def test_add_item_refuses_blank_name(store):
    with pytest.raises(ValidationError):
        store.add_item(_draft(name="   "))
    assert len(store) == 0


def test_add_item_trims_name(store):
    item = store.add_item(_draft(name="  Tile  "))
    assert item.name == "Tile"


def test_update_refuses_blank_name(store):
    item = store.add_item(_draft())
    with pytest.raises(ValidationError):
        store.update_item(item.id, name="  ")
    assert store.get(item.id).name == "Tile"


def test_update_refuses_infinite_price(store):
    item = store.add_item(_draft())
    with pytest.raises(ValidationError):
        store.update_item(item.id, price_per_unit=float("inf"))
    assert store.total_budget() == 120


def test_remove_item(store):
    keep = store.add_item(_draft(name="Keep"))
    drop = store.add_item(_draft(name="Drop"))
    store.remove_item(drop.id)
    assert store.all_items() == (keep,)


def test_remove_unknown_id_is_noop(store):
    store.add_item(_draft())
    revision = store.revision
    store.remove_item("missing")
    assert len(store) == 1
    assert store.revision == revision


def test_clear_all(store):
    store.add_item(_draft())
    store.add_item(_draft(name="Paint"))
    store.clear_all()
    assert store.all_items() == ()
    assert store.total_budget() == 0
    assert store.categorized_items() == ()


def test_budget_difference(store):
    store.add_item(_draft())
    store.user_budget = 500
    assert store.budget_difference() == 380


def test_negative_budget_rejected(store):
    with pytest.raises(ValueError, match="non-negative"):
        store.user_budget = -1


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_budget_rejected(store, value):
    store.add_item(_draft())
    store.user_budget = 500
    with pytest.raises(ValueError, match="finite"):
        store.user_budget = value
    assert store.user_budget == 500
    assert store.budget_difference() == 380


def test_derived_views_cached_until_mutation(store):
    store.add_item(_draft())
    first = store.categorized_items()
    assert store.categorized_items() is first
    store.add_item(_draft(name="Grout"))
    second = store.categorized_items()
    assert second is not first
    assert len(second[0].items) == 2


def test_subscribers_notified_on_mutation(store):
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(len(store)))
    item = store.add_item(_draft())
    store.update_item(item.id, quantity=2)
    store.remove_item(item.id)
    unsubscribe()
    store.add_item(_draft())
    assert calls == [1, 1, 0]


def test_total_matches_sum_after_random_operations(store):
    rng = random.Random(1234)
    for step in range(300):
        items = store.all_items()
        op = rng.choice(["add", "add", "update", "remove", "clear"] if items else ["add"])
        if op == "add":
            store.add_item(_draft(
                name=f"item {step}",
                category=rng.choice(["Flooring", "Walls", "", "Lighting"]),
                quantity=rng.randint(1, 20),
                price=rng.choice([0, 1.5, 12, 99.99]),
            ))
        elif op == "update":
            target = rng.choice(items)
            store.update_item(target.id, quantity=rng.randint(1, 20), price_per_unit=rng.randint(0, 50))
        elif op == "remove":
            store.remove_item(rng.choice(items).id)
        else:
            store.clear_all()

        all_items = store.all_items()
        assert store.total_budget() == pytest.approx(sum(i.total_cost for i in all_items))
        assert all(i.total_cost == i.quantity * i.price_per_unit for i in all_items)
        assert sum(c.total for c in store.category_costs()) == pytest.approx(store.total_budget())
