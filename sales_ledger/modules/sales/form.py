from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QFormLayout, QLineEdit, QLabel,
    QGroupBox, QTableWidget, QTableWidgetItem, QPushButton, QAbstractItemView,
    QButtonGroup, QSplitter, QHeaderView,
)
from PySide6.QtGui import QColor, QFont
from PySide6.QtCore import Qt, QEvent, QTimer, Signal

from ...constants import DENOMINATIONS, EXPENSE_CATEGORIES, GRID_COLUMNS, LINE_PAY, SERVICE_FEE
from ...utils.helpers import fmt_money
from ..ledger.navigation import GridCell, Key, SidebarField, cash_field, expense_field
from ..ledger.session import EntrySession, format_qty
from ..ledger.settlement import PaymentMode
from ..ledger.values import display_value, safe_num

# Qt key -> navigation key
_NAV_KEYS = {
    Qt.Key_Return: Key.ENTER,
    Qt.Key_Enter: Key.ENTER,
    Qt.Key_Up: Key.UP,
    Qt.Key_Down: Key.DOWN,
    Qt.Key_Left: Key.LEFT,
    Qt.Key_Right: Key.RIGHT,
}

EXPENSE_LABELS = {
    "stall": "Stall", "cleaning": "Cleaning", "electricity": "Electricity", "gas": "Gas",
    "parking": "Parking", "goods": "Goods", "bags": "Bags", "others": "Others",
}


class SaleEntryForm(QWidget):
    """
    Product grid on the left, drawer/expenses/settlement on the right.

    All values live in an EntrySession; this widget only mirrors them.
    Keystrokes go to session.edit_*, focus-out goes to session.commit_*
    (which evaluates "=..." formulas), and Enter/arrow keys are routed by
    the session's focus navigator.
    """

    COLS = ["Product", "Stock", "Picked", "Original", "Returns", "Sold", "Price", "Subtotal"]
    FIELD_COLS = {"picked": 2, "original": 3, "returns": 4, "price": 6}
    COL_SOLD = 5
    COL_SUBTOTAL = 7

    save_requested = Signal()
    print_requested = Signal()
    merge_print_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.session: EntrySession | None = None
        self._row_ids: list = []
        self._grid_editors: dict[tuple[str, str], QLineEdit] = {}
        self._side_editors: dict[str, QLineEdit] = {}

        # --- header: payment mode + customer ---
        self.btn_cash = QPushButton("Cash"); self.btn_cash.setCheckable(True)
        self.btn_credit = QPushButton("Credit"); self.btn_credit.setCheckable(True)
        self.mode_group = QButtonGroup(self); self.mode_group.setExclusive(True)
        self.mode_group.addButton(self.btn_cash); self.mode_group.addButton(self.btn_credit)
        self.btn_cash.setChecked(True)
        self.edt_customer = QLineEdit(); self.edt_customer.setPlaceholderText("Customer / sales target…")
        self.edt_customer.setMaximumWidth(240)

        header = QHBoxLayout()
        header.addWidget(QLabel("<b>Sales entry</b>"))
        header.addStretch(1)
        header.addWidget(self.btn_cash); header.addWidget(self.btn_credit)
        header.addSpacing(12)
        header.addWidget(QLabel("Customer*")); header.addWidget(self.edt_customer)

        # --- product grid ---
        self.tbl = QTableWidget(0, len(self.COLS))
        self.tbl.setHorizontalHeaderLabels(self.COLS)
        self.tbl.setSelectionMode(QAbstractItemView.NoSelection)
        self.tbl.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.tbl.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        for c, w in ((1, 80), (2, 70), (3, 70), (4, 70), (5, 60), (6, 80), (7, 100)):
            self.tbl.setColumnWidth(c, w)
        vh = self.tbl.verticalHeader()
        vh.setSectionsMovable(True)   # drag a row header to reorder
        vh.sectionMoved.connect(self._on_row_moved)

        self.lab_sales_total = QLabel("0")
        font = QFont(); font.setPointSize(12); font.setBold(True)
        self.lab_sales_total.setFont(font)
        self.lab_sales_total.setStyleSheet("color: #047857;")
        sales_total_row = QHBoxLayout()
        sales_total_row.addWidget(QLabel("Goods total (from products)"))
        sales_total_row.addStretch(1)
        sales_total_row.addWidget(self.lab_sales_total)

        left = QWidget(); left_lay = QVBoxLayout(left)
        left_lay.addLayout(header)
        left_lay.addWidget(self.tbl, 1)
        left_lay.addLayout(sales_total_row)

        # --- sidebar: drawer ---
        self.cash_box = QGroupBox("Cash count")
        cash_lay = QGridLayout(self.cash_box)
        self._denom_amount_labels: dict[int, QLabel] = {}
        for i, d in enumerate(DENOMINATIONS):
            ed = self._make_side_editor(cash_field(d))
            amt = QLabel("0"); amt.setAlignment(Qt.AlignRight | Qt.AlignVCenter); amt.setMinimumWidth(70)
            self._denom_amount_labels[d] = amt
            cash_lay.addWidget(QLabel(f"{d:>5} ×"), i, 0)
            cash_lay.addWidget(ed, i, 1)
            cash_lay.addWidget(amt, i, 2)
        row = len(DENOMINATIONS)
        lab_reserve = QLabel("Reserve −"); lab_reserve.setStyleSheet("color: #b91c1c;")
        cash_lay.addWidget(lab_reserve, row, 0)
        cash_lay.addWidget(self._make_side_editor("reserve"), row, 1)
        self.lab_cash_net = QLabel("0"); self.lab_cash_net.setStyleSheet("color: #b45309; font-weight: bold;")
        cash_lay.addWidget(QLabel("Drawer total"), row + 1, 0)
        cash_lay.addWidget(self.lab_cash_net, row + 1, 2)

        # --- sidebar: expenses (2-wide grid) ---
        self.expense_box = QGroupBox("Expenses & other")
        exp_lay = QGridLayout(self.expense_box)
        for i, cat in enumerate(EXPENSE_CATEGORIES):
            cell = QVBoxLayout()
            cell.addWidget(QLabel(EXPENSE_LABELS.get(cat, cat.title())))
            cell.addWidget(self._make_side_editor(expense_field(cat)))
            exp_lay.addLayout(cell, i // 2, i % 2)
        extra = QFormLayout()
        extra.addRow("Line Pay (received)", self._make_side_editor(LINE_PAY))
        extra.addRow("Service fee (deducted)", self._make_side_editor(SERVICE_FEE))
        exp_lay.addLayout(extra, (len(EXPENSE_CATEGORIES) + 1) // 2, 0, 1, 2)

        # --- sidebar: settlement ---
        settle_box = QGroupBox("Settlement")
        settle_lay = QVBoxLayout(settle_box)
        self.lab_final = QLabel("0")
        big = QFont(); big.setPointSize(18); big.setBold(True)
        self.lab_final.setFont(big)
        self.lab_final.setStyleSheet("color: #1d4ed8;")
        self.btn_save = QPushButton("Save today's entry")
        self.btn_print = QPushButton("Print")
        self.btn_merge_print = QPushButton("Merge print…")
        settle_lay.addWidget(self.lab_final)
        settle_lay.addWidget(self.btn_save)
        btns = QHBoxLayout(); btns.addWidget(self.btn_print); btns.addWidget(self.btn_merge_print)
        settle_lay.addLayout(btns)

        right = QWidget(); right_lay = QVBoxLayout(right)
        right_lay.addWidget(self.cash_box)
        right_lay.addWidget(self.expense_box)
        right_lay.addStretch(1)
        right_lay.addWidget(settle_box)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(left); splitter.addWidget(right)
        splitter.setSizes([760, 340])
        lay = QVBoxLayout(self); lay.addWidget(splitter)

        # wiring
        self.btn_cash.clicked.connect(lambda: self._set_mode(PaymentMode.CASH))
        self.btn_credit.clicked.connect(lambda: self._set_mode(PaymentMode.CREDIT))
        self.edt_customer.textEdited.connect(self._on_customer_edited)
        self.btn_save.clicked.connect(self.save_requested)
        self.btn_print.clicked.connect(self.print_requested)
        self.btn_merge_print.clicked.connect(self.merge_print_requested)

    # ------------------------------------------------------------------
    # Editors
    # ------------------------------------------------------------------
    def _make_side_editor(self, name: str) -> QLineEdit:
        ed = QLineEdit()
        ed.setAlignment(Qt.AlignRight)
        ed.setPlaceholderText("0")
        ed.setObjectName(f"input_{name}")
        ed._nav = ("side", name)
        ed.installEventFilter(self)
        ed.textEdited.connect(lambda text, n=name: self._on_side_edited(n, text))
        ed.editingFinished.connect(lambda n=name, e=ed: self._on_side_committed(n, e.text()))
        self._side_editors[name] = ed
        return ed

    def _make_grid_editor(self, product_id, field: str) -> QLineEdit:
        ed = QLineEdit()
        ed.setAlignment(Qt.AlignCenter)
        ed.setFrame(False)
        ed._nav = ("grid", product_id, field)
        ed.installEventFilter(self)
        ed.textEdited.connect(lambda text, p=product_id, f=field: self._on_row_edited(p, f, text))
        ed.editingFinished.connect(lambda p=product_id, f=field, e=ed: self._on_row_committed(p, f, e.text()))
        self._grid_editors[(str(product_id), field)] = ed
        return ed

    def grid_editor(self, row: int, field: str) -> QLineEdit:
        return self._grid_editors[(str(self.session.rows[row].product_id), field)]

    def side_editor(self, name: str) -> QLineEdit:
        return self._side_editors[name]

    # ------------------------------------------------------------------
    # Session binding
    # ------------------------------------------------------------------
    def set_session(self, session: EntrySession):
        self.session = session
        self.edt_customer.setText(session.customer)
        (self.btn_credit if session.mode is PaymentMode.CREDIT else self.btn_cash).setChecked(True)
        self._rebuild_table()
        self._sync_sidebar()
        self._apply_mode_lock()
        self.refresh_totals()

    def _rebuild_table(self):
        # undo header drags; the session order is now the row order
        vh = self.tbl.verticalHeader()
        vh.blockSignals(True)
        for logical in range(self.tbl.rowCount()):
            vh.moveSection(vh.visualIndex(logical), logical)
        vh.blockSignals(False)

        # old editors may still emit editingFinished while being torn down
        for ed in self._grid_editors.values():
            ed.blockSignals(True)
        self._grid_editors.clear()
        self.tbl.setRowCount(0)
        rows = self.session.rows if self.session else []
        self._row_ids = [r.product_id for r in rows]
        self.tbl.setRowCount(len(rows))
        for i, r in enumerate(rows):
            name = QTableWidgetItem(r.name)
            stock = QTableWidgetItem(f"{format_qty(r.stock)} / {format_qty(r.original_stock)}")
            stock.setForeground(QColor("gray"))
            self.tbl.setItem(i, 0, name)
            self.tbl.setItem(i, 1, stock)
            for f, c in self.FIELD_COLS.items():
                self.tbl.setCellWidget(i, c, self._make_grid_editor(r.product_id, f))
            for c in (self.COL_SOLD, self.COL_SUBTOTAL):
                it = QTableWidgetItem("")
                it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.tbl.setItem(i, c, it)
            self._sync_row(r.product_id)

    def _sync_row(self, product_id, skip_field: str | None = None):
        """Copy one row's values into its editors/cells (except the one being typed in)."""
        r = self.session.row(product_id)
        i = self.session.row_index(product_id)
        for f in GRID_COLUMNS:
            if f == skip_field:
                continue
            ed = self._grid_editors.get((str(product_id), f))
            if ed is not None:
                ed.setText(display_value(r.value(f), blank_zero=(f != "price")))
        self.tbl.item(i, self.COL_SOLD).setText(format_qty(r.sold))
        self.tbl.item(i, self.COL_SUBTOTAL).setText(fmt_money(r.subtotal))

    def _sync_sidebar(self):
        s = self.session
        for d in DENOMINATIONS:
            self._side_editors[cash_field(d)].setText(display_value(s.drawer.counts[d], blank_zero=True))
        self._side_editors["reserve"].setText(display_value(s.reserve))
        for cat in EXPENSE_CATEGORIES:
            self._side_editors[expense_field(cat)].setText(display_value(s.expenses.amounts[cat], blank_zero=True))
        for cat in (LINE_PAY, SERVICE_FEE):
            self._side_editors[cat].setText(display_value(s.expenses.amounts[cat], blank_zero=True))

    def refresh_totals(self):
        if self.session is None:
            return
        st = self.session.settlement()
        for d, lab in self._denom_amount_labels.items():
            lab.setText(fmt_money(d * safe_num(self.session.drawer.counts[d])))
        self.lab_sales_total.setText(fmt_money(st.total_row_subtotal))
        self.lab_cash_net.setText(fmt_money(st.drawer_total))
        self.lab_final.setText(fmt_money(st.final_total))

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def _on_customer_edited(self, text: str):
        if self.session is not None:
            self.session.customer = text

    def _on_row_edited(self, product_id, field: str, text: str):
        if self.session is None:
            return
        self.session.edit_row(product_id, field, text)
        self._sync_row(product_id, skip_field=field)
        self.refresh_totals()

    def _on_row_committed(self, product_id, field: str, text: str):
        if self.session is None:
            return
        self.session.commit_row(product_id, field, text)
        self._sync_row(product_id)
        self.refresh_totals()

    def _side_call(self, name: str, text: str, commit: bool):
        s = self.session
        if name.startswith("cash_"):
            d = int(name.split("_", 1)[1])
            return (s.commit_cash if commit else s.edit_cash)(d, text)
        if name == "reserve":
            return (s.commit_reserve if commit else s.edit_reserve)(text)
        cat = name[len("expense_"):] if name.startswith("expense_") else name
        return (s.commit_expense if commit else s.edit_expense)(cat, text)

    def _on_side_edited(self, name: str, text: str):
        if self.session is None:
            return
        self._side_call(name, text, commit=False)
        self.refresh_totals()

    def _on_side_committed(self, name: str, text: str):
        if self.session is None or not self.session.sidebar_editable:
            return
        value = self._side_call(name, text, commit=True)
        self._side_editors[name].setText(display_value(value, blank_zero=(name != "reserve")))
        self.refresh_totals()

    def _set_mode(self, mode: PaymentMode):
        if self.session is None:
            return
        self.session.set_mode(mode)
        self._side_editors["reserve"].setText(display_value(self.session.reserve))
        self._apply_mode_lock()
        self.refresh_totals()

    def _apply_mode_lock(self):
        editable = self.session.sidebar_editable
        self.cash_box.setEnabled(editable)
        self.expense_box.setEnabled(editable)

    def _on_row_moved(self, _logical: int, _old: int, _new: int):
        vh = self.tbl.verticalHeader()
        order = [self._row_ids[vh.logicalIndex(v)] for v in range(self.tbl.rowCount())]
        self.session.reorder(order)
        # rebuild after the header finishes its own move handling
        QTimer.singleShot(0, self._rebuild_table)

    # ------------------------------------------------------------------
    # Keyboard navigation
    # ------------------------------------------------------------------
    def _current_target(self, nav):
        if nav[0] == "grid":
            _, product_id, field = nav
            return GridCell(self.session.row_index(product_id), field)
        return SidebarField(nav[1])

    def focus_field(self, target) -> QLineEdit | None:
        if isinstance(target, GridCell):
            if not 0 <= target.row < len(self.session.rows):
                return None
            ed = self.grid_editor(target.row, target.column)
            self.tbl.scrollTo(self.tbl.model().index(target.row, self.FIELD_COLS[target.column]))
        else:
            ed = self._side_editors.get(target.name)
        if ed is None:
            return None
        ed.setFocus(Qt.TabFocusReason)
        ed.selectAll()
        return ed

    def eventFilter(self, obj, event):
        if event.type() == QEvent.KeyPress and self.session is not None:
            key = _NAV_KEYS.get(event.key())
            nav = getattr(obj, "_nav", None)
            if key is not None and nav is not None:
                target = self.session.route(self._current_target(nav), key)
                if target is not None:
                    self.focus_field(target)
                return True
        return super().eventFilter(obj, event)
