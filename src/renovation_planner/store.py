from __future__ import annotations
import logging
import math
import random
import string
import time
from typing import Any, Callable, Iterable, Optional
from renovation_planner import derive
from renovation_planner.models import (
    CategorizedGroup,
    CategoryCost,
    ItemDraft,
    PurchaseTotals,
    ShoppingItem,
)

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

_ID_ALPHABET = string.digits + string.ascii_lowercase
_READ_ONLY_FIELDS = frozenset({"id", "total_cost"})


def _make_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"{time.time_ns()}{suffix}"


class Observable:
    """Minimal publish/subscribe: listeners are called with no arguments after each change."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class ItemStore(Observable):
    """Owns the session's shopping items and the user's budget.

    Derived views are recomputed on read and cached until the next mutation.
    """

    def __init__(self) -> None:
        super().__init__()
        self._items: list[ShoppingItem] = []
        self._user_budget = 0.0
        self._revision = 0
        self._cache: dict[str, tuple[int, Any]] = {}

    def __len__(self) -> int:
        return len(self._items)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def user_budget(self) -> float:
        return self._user_budget

    @user_budget.setter
    def user_budget(self, value: float) -> None:
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Budget must be a finite non-negative number, got {value}")
        self._user_budget = float(value)
        self._changed()

    def all_items(self) -> tuple[ShoppingItem, ...]:
        return tuple(self._items)

    def get(self, item_id: str) -> Optional[ShoppingItem]:
        return next((i for i in self._items if i.id == item_id), None)

    def add_item(self, draft: ItemDraft) -> ShoppingItem:
        item = self._stamp(draft)
        self._items.append(item)
        self._changed()
        return item

    def add_items(self, drafts: Iterable[ItemDraft]) -> tuple[ShoppingItem, ...]:
        """Append a batch after the existing items, notifying once."""
        batch = tuple(self._stamp(d) for d in drafts)
        if batch:
            self._items.extend(batch)
            self._changed()
        return batch

    def update_item(self, item_id: str, **changes: Any) -> None:
        """Replace fields of the item with ``item_id``.

        An unknown id is ignored before the changes are looked at. For a known
        id, read-only or unknown field names raise ``ValueError`` and invalid
        values raise pydantic's ``ValidationError``; the item is left as it was.
        """
        index = next((n for n, i in enumerate(self._items) if i.id == item_id), None)
        if index is None:
            logger.debug("Ignoring update for unknown item %s", item_id)
            return

        forbidden = _READ_ONLY_FIELDS & changes.keys()
        if forbidden:
            raise ValueError(f"Cannot set {', '.join(sorted(forbidden))} on a shopping item")
        unknown = changes.keys() - ItemDraft.model_fields.keys()
        if unknown:
            raise ValueError(f"Unknown shopping item field(s): {', '.join(sorted(unknown))}")

        data = self._items[index].model_dump(exclude={"total_cost"})
        data.update(changes)
        self._items[index] = ShoppingItem.model_validate(data)
        self._changed()

    def remove_item(self, item_id: str) -> None:
        remaining = [i for i in self._items if i.id != item_id]
        if len(remaining) != len(self._items):
            self._items = remaining
            self._changed()

    def clear_all(self) -> None:
        self._items = []
        self._changed()

    def categorized_items(self) -> tuple[CategorizedGroup, ...]:
        return self._derived("categorized", derive.categorized_items)

    def total_budget(self) -> float:
        return self._derived("total", derive.total_budget)

    def budget_difference(self) -> float:
        return self._derived(
            "budget_difference",
            lambda items: derive.budget_difference(self._user_budget, items),
        )

    def category_costs(self) -> tuple[CategoryCost, ...]:
        return self._derived("category_costs", derive.category_costs)

    def purchase_totals(self) -> PurchaseTotals:
        return self._derived("purchase_totals", derive.purchase_totals)

    def _stamp(self, draft: ItemDraft) -> ShoppingItem:
        return ShoppingItem(id=_make_id(), **draft.model_dump(include=set(ItemDraft.model_fields)))

    def _derived(self, name: str, compute: Callable[[list[ShoppingItem]], Any]) -> Any:
        cached = self._cache.get(name)
        if cached is not None and cached[0] == self._revision:
            return cached[1]
        value = compute(self._items)
        self._cache[name] = (self._revision, value)
        return value

    def _changed(self) -> None:
        self._revision += 1
        self._notify()
