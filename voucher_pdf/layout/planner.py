# voucher_pdf/layout/planner.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import cm

from voucher_pdf.errors import LayoutError


# =========================
# Voucher canvas (logical size of one rendered voucher)
# =========================

CANVAS_W = 600.0
CANVAS_H = 400.0


@dataclass(frozen=True)
class PageGeometry:
    """
    Grid geometry for one document family. Units are PDF points, origin top-left
    (y grows downwards), so slot (0, 0) sits in the upper-left corner.
    """
    page_w: float
    page_h: float
    item_w: float
    item_h: float
    margin: float
    columns: int
    rows: int

    @property
    def items_per_page(self) -> int:
        return self.rows * self.columns

    def slot_origin(self, slot: int) -> Tuple[float, float]:
        if slot < 0 or slot >= self.items_per_page:
            raise LayoutError(f"slot {slot} outside page grid of {self.items_per_page}")
        row = slot // self.columns
        col = slot % self.columns
        x = self.margin + col * (self.item_w + self.margin)
        y = self.margin + row * (self.item_h + self.margin)
        return x, y


def plan(
    page_size: Tuple[float, float],
    margin: float,
    item_size: Tuple[float, float],
    grid_shape: Tuple[int, int],
) -> PageGeometry:
    """
    grid_shape is (rows, columns). Raises LayoutError instead of clamping when the
    grid is empty or when the items plus margins do not fit the page.
    """
    page_w, page_h = (float(v) for v in page_size)
    item_w, item_h = (float(v) for v in item_size)
    rows, columns = grid_shape

    if rows < 1 or columns < 1:
        raise LayoutError(f"grid {rows}x{columns} holds no items")
    if page_w <= 0 or page_h <= 0 or item_w <= 0 or item_h <= 0:
        raise LayoutError("page and item sizes must be positive")
    if margin < 0:
        raise LayoutError("margin must not be negative")

    need_w = columns * item_w + (columns + 1) * margin
    need_h = rows * item_h + (rows + 1) * margin
    if need_w > page_w or need_h > page_h:
        raise LayoutError(
            f"{rows}x{columns} grid of {item_w:g}x{item_h:g} (margin {margin:g}) "
            f"needs {need_w:g}x{need_h:g}, page is {page_w:g}x{page_h:g}"
        )

    return PageGeometry(
        page_w=page_w,
        page_h=page_h,
        item_w=item_w,
        item_h=item_h,
        margin=float(margin),
        columns=int(columns),
        rows=int(rows),
    )


# =========================
# Document families
# =========================

# A4 landscape, 2x2 vouchers keeping the 3:2 canvas ratio
GRID_PAGE = landscape(A4)
GRID_MARGIN = 20.0
GRID_ITEM = (390.0, 260.0)
GRID_SHAPE = (2, 2)

# 10x15 cm portrait card, two vouchers stacked
TICKET_PAGE = (10 * cm, 15 * cm)
TICKET_MARGIN = 5.0
TICKET_ITEM = (273.0, 182.0)
TICKET_SHAPE = (2, 1)

LAYOUTS: Dict[str, Tuple[Tuple[float, float], float, Tuple[float, float], Tuple[int, int]]] = {
    "grid": (GRID_PAGE, GRID_MARGIN, GRID_ITEM, GRID_SHAPE),
    "ticket": (TICKET_PAGE, TICKET_MARGIN, TICKET_ITEM, TICKET_SHAPE),
}


def layout_geometry(name: str) -> PageGeometry:
    try:
        page_size, margin, item_size, grid_shape = LAYOUTS[name]
    except KeyError:
        raise LayoutError(f"unknown layout {name!r}")
    return plan(page_size, margin, item_size, grid_shape)
