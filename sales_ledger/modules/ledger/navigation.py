"""
ledger/navigation.py

Keyboard focus routing for the entry form.

The product grid is rows x GRID_COLUMNS; the sidebar is the drawer count,
the reserve, a two-column expense grid, line pay and the service fee.
`route` maps (current field, key, grid shape) to the field that should take
focus next, or None to stay put. It never looks at ledger values.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ...constants import DENOMINATIONS, EXPENSE_CATEGORIES, GRID_COLUMNS, LINE_PAY, SERVICE_FEE

__all__ = [
    "Key",
    "GridCell",
    "SidebarField",
    "FocusTarget",
    "GridShape",
    "SidebarLinks",
    "SIDEBAR_ORDER",
    "SIDEBAR_ENTRY",
    "SIDEBAR_LINKS",
    "cash_field",
    "expense_field",
    "route",
]


class Key(str, Enum):
    ENTER = "Enter"
    UP = "ArrowUp"
    DOWN = "ArrowDown"
    LEFT = "ArrowLeft"
    RIGHT = "ArrowRight"


@dataclass(frozen=True)
class GridCell:
    row: int
    column: str


@dataclass(frozen=True)
class SidebarField:
    name: str


FocusTarget = Union[GridCell, SidebarField]


@dataclass(frozen=True)
class GridShape:
    row_count: int
    sidebar_enabled: bool = True

    @property
    def last_cell(self) -> Optional[GridCell]:
        if self.row_count <= 0:
            return None
        return GridCell(self.row_count - 1, GRID_COLUMNS[-1])


@dataclass(frozen=True)
class SidebarLinks:
    next: Optional[str] = None
    prev: Optional[str] = None
    up: Optional[str] = None
    down: Optional[str] = None
    left: Optional[str] = None
    right: Optional[str] = None


def cash_field(denomination: int) -> str:
    return f"cash_{denomination}"


def expense_field(category: str) -> str:
    return f"expense_{category}"


_CASH = [cash_field(d) for d in DENOMINATIONS]
_EXPENSES = [expense_field(c) for c in EXPENSE_CATEGORIES]
SIDEBAR_ORDER = tuple(_CASH + ["reserve"] + _EXPENSES + [LINE_PAY, SERVICE_FEE])
SIDEBAR_ENTRY = SidebarField(SIDEBAR_ORDER[0])

_EXPENSE_GRID_WIDTH = 2


def _build_links() -> dict[str, SidebarLinks]:
    links = {}
    for i, name in enumerate(SIDEBAR_ORDER):
        nxt = SIDEBAR_ORDER[i + 1] if i + 1 < len(SIDEBAR_ORDER) else None
        prev = SIDEBAR_ORDER[i - 1] if i > 0 else None
        # linear fields: up/down walk the list, left leaves the sidebar
        links[name] = SidebarLinks(next=nxt, prev=prev, up=prev, down=nxt)

    # expense categories sit in a 2-wide grid: up/down jump a whole row
    for i, name in enumerate(_EXPENSES):
        col = i % _EXPENSE_GRID_WIDTH
        above = _EXPENSES[i - _EXPENSE_GRID_WIDTH] if i >= _EXPENSE_GRID_WIDTH else "reserve"
        below = _EXPENSES[i + _EXPENSE_GRID_WIDTH] if i + _EXPENSE_GRID_WIDTH < len(_EXPENSES) else LINE_PAY
        left = _EXPENSES[i - 1] if col > 0 else None
        right = _EXPENSES[i + 1] if col + 1 < _EXPENSE_GRID_WIDTH and i + 1 < len(_EXPENSES) else None
        base = links[name]
        links[name] = SidebarLinks(next=base.next, prev=base.prev, up=above, down=below, left=left, right=right)
    return links


SIDEBAR_LINKS = _build_links()


def _grid_route(cell: GridCell, key: Key, shape: GridShape) -> Optional[FocusTarget]:
    n = shape.row_count
    if n <= 0 or cell.column not in GRID_COLUMNS:
        return None
    row = min(max(cell.row, 0), n - 1)
    col = GRID_COLUMNS.index(cell.column)
    last_col = len(GRID_COLUMNS) - 1
    sidebar = SIDEBAR_ENTRY if shape.sidebar_enabled else None

    if key in (Key.ENTER, Key.RIGHT):
        if col < last_col:
            return GridCell(row, GRID_COLUMNS[col + 1])
        if row < n - 1:
            return GridCell(row + 1, GRID_COLUMNS[0])
        return sidebar
    if key is Key.LEFT:
        if col > 0:
            return GridCell(row, GRID_COLUMNS[col - 1])
        if row > 0:
            return GridCell(row - 1, GRID_COLUMNS[last_col])
        return None
    if key is Key.UP:
        return GridCell(row - 1, cell.column) if row > 0 else sidebar
    if key is Key.DOWN:
        return GridCell(row + 1, cell.column) if row < n - 1 else sidebar
    return None


def _sidebar_route(field: SidebarField, key: Key, shape: GridShape) -> Optional[FocusTarget]:
    links = SIDEBAR_LINKS.get(field.name)
    if links is None:
        return None
    back_to_grid = shape.last_cell

    if key is Key.ENTER:
        target = links.next
    elif key is Key.DOWN:
        target = links.down
    elif key is Key.UP:
        if links.up is None:
            return back_to_grid
        target = links.up
    elif key is Key.LEFT:
        if links.left is None:
            return back_to_grid
        target = links.left
    else:
        target = links.right

    if target is None or not shape.sidebar_enabled:
        return None
    return SidebarField(target)


def route(current: FocusTarget, key, shape: GridShape) -> Optional[FocusTarget]:
    """
    Next field to focus for `key` pressed in `current`, or None.

    Unknown keys and unknown fields route nowhere.
    """
    try:
        key = Key(key)
    except ValueError:
        return None
    if isinstance(current, GridCell):
        return _grid_route(current, key, shape)
    if isinstance(current, SidebarField):
        return _sidebar_route(current, key, shape)
    return None
