"""
Ledger core: formula fields, row clamping, drawer settlement, merged
manifests and keyboard focus routing. Pure Python, no Qt and no SQL.
"""

from .values import Numeric, PendingFormula, FieldValue, safe_num, format_number, display_value
from .formula import evaluate
from .rows import ProductRow, PriceMemory, apply_edit
from .cash import CashDrawer, ExpenseLedger
from .settlement import PaymentMode, Settlement, compute_settlement, total_row_subtotal
from .merge import SaleLine, SaleRecord, MergedLedgerRow, merge
from .navigation import Key, GridCell, SidebarField, GridShape, route
from .session import CloneSnapshot, CloneSlot, EntrySession, snapshot_from_record

__all__ = [
    "Numeric", "PendingFormula", "FieldValue", "safe_num", "format_number", "display_value",
    "evaluate",
    "ProductRow", "PriceMemory", "apply_edit",
    "CashDrawer", "ExpenseLedger",
    "PaymentMode", "Settlement", "compute_settlement", "total_row_subtotal",
    "SaleLine", "SaleRecord", "MergedLedgerRow", "merge",
    "Key", "GridCell", "SidebarField", "GridShape", "route",
    "CloneSnapshot", "CloneSlot", "EntrySession", "snapshot_from_record",
]
