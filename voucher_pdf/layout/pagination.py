# voucher_pdf/layout/pagination.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Sequence, TypeVar

from voucher_pdf.errors import EmptyBatchError, LayoutError
from voucher_pdf.layout.planner import PageGeometry

T = TypeVar("T")


@dataclass(frozen=True)
class Placement(Generic[T]):
    page_index: int
    slot_index: int
    item: T


def iter_placements(items: Iterable[T], items_per_page: int) -> Iterator[Placement[T]]:
    """
    Lazily assign (page, slot) in arrival order: item k -> (k // P, k % P).
    Works on any iterable, including generators that drop items on the way.
    """
    if items_per_page < 1:
        raise LayoutError("items_per_page must be >= 1")

    page = 0
    slot = 0
    for item in items:
        if slot == items_per_page:
            page += 1
            slot = 0
        yield Placement(page_index=page, slot_index=slot, item=item)
        slot += 1


def paginate(records: Sequence[T], geometry: PageGeometry) -> Iterator[Placement[T]]:
    # Not a generator itself: the empty check must fire at call time.
    if not records:
        raise EmptyBatchError("no voucher records to paginate")
    return iter_placements(iter(records), geometry.items_per_page)


def page_count_for(n_items: int, geometry: PageGeometry) -> int:
    per_page = geometry.items_per_page
    return (n_items + per_page - 1) // per_page
