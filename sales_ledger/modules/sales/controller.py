from PySide6.QtWidgets import QWidget, QDialog
import sqlite3

from ..base_module import BaseModule
from .form import SaleEntryForm
from .merge_dialog import MergePrintDialog
from .printing import PrintError, render_print_html
from ..ledger.session import EntrySession, snapshot_from_record
from ...constants import DEFAULT_PRINT_TEMPLATE, MERGED_PRINT_TEMPLATE
from ...database.repositories import DomainError
from ...database.repositories.sales_repo import SalesRepo
from ...database.repositories.products_repo import ProductsRepo
from ...database.repositories.price_memory_repo import PriceMemoryRepo
from ...database.repositories.clone_slot_repo import CloneSlotRepo
from ...utils.ui_helpers import info, error
from ...utils.helpers import today_str
from ...utils.validators import non_empty
from ...utils.loggers import get_logger

_log = get_logger(__name__)


class SalesController(BaseModule):
    """
    Owns one EntrySession at a time and connects it to the repositories.

    A failed save leaves the session exactly as it was so the operator can
    retry; a successful save starts a fresh session from the catalog.
    """

    def __init__(self, conn: sqlite3.Connection, sales_rep: str = ""):
        super().__init__()
        self.conn = conn
        self.sales_rep = sales_rep
        self.view = SaleEntryForm()
        self.active_dialog = None

        self.products = ProductsRepo(conn)
        self.repo = SalesRepo(conn)
        self.prices = PriceMemoryRepo(conn)
        self.clone_slot = CloneSlotRepo(conn)

        self.session: EntrySession | None = None
        self._wire()
        self.load()

    def get_widget(self) -> QWidget:
        return self.view

    def _wire(self):
        self.view.save_requested.connect(self.save)
        self.view.print_requested.connect(self.print_current)
        self.view.merge_print_requested.connect(self.open_today)

    # ---- session -----------------------------------------------------------

    def load(self):
        """Fresh session from the catalog, pre-filled by a waiting clone if any."""
        clone = self.clone_slot.take()
        self.session = EntrySession.from_catalog(
            self.products.list_catalog(),
            price_memory=self.prices,
            clone=clone,
            sales_rep=self.sales_rep,
        )
        if clone is not None:
            _log.info("Loaded entry from clone of %r", clone.customer)
        self.view.set_session(self.session)

    def save(self) -> str | None:
        s = self.session
        if not non_empty(s.customer):
            info(self.view, "Customer required", "Enter a customer before saving.")
            self.view.edt_customer.setFocus()
            return None

        s.commit_pending()
        try:
            sale_id = self.repo.save_sale(s.sale_payload())
        except (DomainError, sqlite3.Error) as e:
            _log.exception("Saving entry for %r failed", s.customer)
            error(self.view, "Save failed", f"Could not save this entry:\n{e}")
            self.view.set_session(s)
            return None

        _log.info("Saved sale %s (%s, %s)", sale_id, s.customer, s.mode.value)
        info(self.view, "Saved", f"Entry {sale_id} saved.")
        self.load()
        return sale_id

    # ---- printing / today's entries ----------------------------------------

    def _preview(self, payload: dict, doc_name: str):
        from ...widgets.print_preview import PrintPreview
        try:
            html = render_print_html(payload)
        except PrintError as e:
            _log.error("Print failed: %s", e)
            error(self.view, "Print failed", str(e))
            return
        self.active_dialog = PrintPreview(html, doc_name, self.view)
        self.active_dialog.show()

    def print_current(self):
        self.session.commit_pending()
        self.view.set_session(self.session)
        payload = self.session.print_payload(DEFAULT_PRINT_TEMPLATE)
        self._preview(payload, payload["title"] or "sales_sheet")

    def open_today(self):
        records = self.repo.list_for_date(today_str())
        if not records:
            info(self.view, "Nothing saved", "No entries have been saved today.")
            return
        dlg = MergePrintDialog(records, self.view)
        if dlg.exec() != QDialog.Accepted:
            return
        chosen = dlg.selected_records()
        if dlg.action == MergePrintDialog.CLONE and len(chosen) == 1:
            self.clone(chosen[0])
        elif dlg.action == MergePrintDialog.MERGE and chosen:
            self.print_merged(chosen)

    def print_merged(self, records):
        payload = self.session.print_payload(MERGED_PRINT_TEMPLATE, records)
        self._preview(payload, f"merged_{today_str()}")

    def clone(self, record):
        """Queue `record` as the template for the next entry and reload into it."""
        self.clone_slot.put(snapshot_from_record(record))
        self.load()
