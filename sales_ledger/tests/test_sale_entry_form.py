# sales_ledger/tests/test_sale_entry_form.py
from __future__ import annotations

import pytest
from PySide6.QtCore import Qt

from sales_ledger.modules.ledger.navigation import GridCell, SidebarField
from sales_ledger.modules.ledger.session import EntrySession
from sales_ledger.modules.ledger.values import Numeric
from sales_ledger.modules.sales.form import SaleEntryForm


@pytest.fixture()
def form(qtbot, catalog, price_memory):
    f = SaleEntryForm()
    qtbot.addWidget(f)
    f.set_session(EntrySession.from_catalog(catalog, price_memory=price_memory))
    with qtbot.waitExposed(f):
        f.show()
    return f


def test_rows_follow_session_order(form):
    assert [form.tbl.item(i, 0).text() for i in range(form.tbl.rowCount())] == ["Juice", "Tea", "Crackers"]
    assert form.tbl.item(1, 1).text() == "10 / 5"
    # zero quantities show blank, price always shows
    assert form.grid_editor(1, "picked").text() == ""
    assert form.grid_editor(1, "price").text() == "30"


def test_typing_updates_row_and_totals(qtbot, form):
    qtbot.keyClicks(form.grid_editor(1, "picked"), "3")
    assert form.session.row(1).picked == Numeric(3)
    assert form.tbl.item(1, SaleEntryForm.COL_SOLD).text() == "3"
    assert form.tbl.item(1, SaleEntryForm.COL_SUBTOTAL).text() == "90"
    assert form.lab_sales_total.text() == "90"


def test_typed_quantity_is_clamped_on_commit(qtbot, form):
    ed = form.grid_editor(1, "picked")
    qtbot.keyClicks(ed, "25")
    ed.editingFinished.emit()
    assert ed.text() == "10"


def test_formula_is_kept_while_typing_and_evaluated_on_commit(qtbot, form):
    ed = form.grid_editor(1, "original")
    qtbot.keyClicks(ed, "=1+2")
    assert ed.text() == "=1+2"
    assert form.session.row(1).sold == 0
    ed.editingFinished.emit()
    assert ed.text() == "3"
    assert form.session.row(1).sold == 3


def test_enter_and_arrows_route_focus(qtbot, form, monkeypatch):
    seen = []
    monkeypatch.setattr(form, "focus_field", seen.append)
    qtbot.keyClick(form.grid_editor(0, "picked"), Qt.Key_Return)
    qtbot.keyClick(form.grid_editor(0, "picked"), Qt.Key_Down)
    qtbot.keyClick(form.grid_editor(2, "price"), Qt.Key_Enter)
    qtbot.keyClick(form.side_editor("cash_1000"), Qt.Key_Up)
    assert seen == [
        GridCell(0, "original"),
        GridCell(1, "picked"),
        SidebarField("cash_1000"),
        GridCell(2, "price"),
    ]


def test_focus_field_returns_editor(form):
    assert form.focus_field(GridCell(0, "price")) is form.grid_editor(0, "price")
    assert form.focus_field(SidebarField("reserve")) is form.side_editor("reserve")
    assert form.focus_field(GridCell(7, "price")) is None


def test_cash_count_drives_drawer_and_settlement(qtbot, form):
    qtbot.keyClicks(form.side_editor("cash_1000"), "6")
    qtbot.keyClicks(form.side_editor("cash_100"), "2")
    assert form.lab_cash_net.text() == "1,200"
    assert form.lab_final.text() == "1,200"
    assert form._denom_amount_labels[1000].text() == "6,000"


def test_credit_mode_locks_sidebar(qtbot, form):
    qtbot.keyClicks(form.grid_editor(0, "picked"), "2")   # juice 2 x 35
    qtbot.mouseClick(form.btn_credit, Qt.LeftButton)
    assert not form.cash_box.isEnabled()
    assert not form.expense_box.isEnabled()
    assert form.side_editor("reserve").text() == "0"
    assert form.lab_final.text() == "70"
    qtbot.mouseClick(form.btn_cash, Qt.LeftButton)
    assert form.cash_box.isEnabled()
    assert form.side_editor("reserve").text() == "5000"


def test_customer_text_goes_to_session(qtbot, form):
    qtbot.keyClicks(form.edt_customer, "North")
    assert form.session.customer == "North"


def test_row_header_drag_reorders_session(qtbot, form):
    form.tbl.verticalHeader().moveSection(2, 0)
    assert [r.name for r in form.session.rows] == ["Crackers", "Juice", "Tea"]
    qtbot.waitUntil(lambda: form.tbl.item(0, 0).text() == "Crackers")


def test_buttons_emit_requests(qtbot, form):
    with qtbot.waitSignal(form.save_requested, timeout=1000):
        qtbot.mouseClick(form.btn_save, Qt.LeftButton)
    with qtbot.waitSignal(form.merge_print_requested, timeout=1000):
        qtbot.mouseClick(form.btn_merge_print, Qt.LeftButton)
