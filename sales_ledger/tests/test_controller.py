# sales_ledger/tests/test_controller.py
from __future__ import annotations

import pytest
from PySide6.QtWidgets import QDialog

from sales_ledger.database.repositories import DomainError
from sales_ledger.database.repositories.sales_repo import SalesRepo
from sales_ledger.modules.ledger.values import Numeric, PendingFormula
from sales_ledger.modules.sales import controller as ctl_mod
from sales_ledger.modules.sales.controller import SalesController
from sales_ledger.utils.helpers import today_str


@pytest.fixture()
def messages(monkeypatch):
    seen = []
    monkeypatch.setattr(ctl_mod, "info", lambda parent, title, text: seen.append(("info", title, text)))
    monkeypatch.setattr(ctl_mod, "error", lambda parent, title, text: seen.append(("error", title, text)))
    return seen


@pytest.fixture()
def ctrl(qtbot, conn, ids, messages):
    c = SalesController(conn, sales_rep="Mei")
    qtbot.addWidget(c.get_widget())
    return c


def _fill(ctrl, ids, customer="North"):
    s = ctrl.session
    s.customer = customer
    s.commit_row(ids["tea"], "picked", "=1+1")
    s.edit_row(ids["juice"], "picked", "=3*")   # left pending, counts as 0


def test_save_requires_customer(ctrl, messages, conn):
    assert ctrl.save() is None
    assert messages[-1][1] == "Customer required"
    assert conn.execute("SELECT COUNT(*) FROM sales").fetchone()[0] == 0


def test_successful_save_starts_fresh_session(ctrl, ids, messages):
    _fill(ctrl, ids)
    before = ctrl.session
    sale_id = ctrl.save()
    assert sale_id.startswith("SL")
    assert messages[-1][0] == "info"
    assert ctrl.session is not before
    assert ctrl.session.customer == ""
    assert ctrl.session.row(ids["tea"]).picked == Numeric(0)

    [rec] = [r for r in SalesRepo(ctrl.conn).list_for_date(today_str()) if r.sale_id == sale_id]
    assert [ln.picked for ln in rec.lines] == [2]


def test_failed_save_keeps_everything(ctrl, ids, messages, monkeypatch):
    _fill(ctrl, ids)

    def boom(payload, **kw):
        raise DomainError("database is read-only")

    monkeypatch.setattr(ctrl.repo, "save_sale", boom)
    before = ctrl.session
    assert ctrl.save() is None
    assert messages[-1][0] == "error"
    assert "read-only" in messages[-1][2]
    assert ctrl.session is before
    assert ctrl.session.customer == "North"
    assert ctrl.session.row(ids["tea"]).picked == Numeric(2)


def test_clone_prefills_next_session(ctrl, ids):
    _fill(ctrl, ids, customer="Temple fair")
    ctrl.session.edit_cash(1000, 7)
    ctrl.save()
    rec = ctrl.repo.list_for_date(today_str())[0]

    ctrl.clone(rec)
    s = ctrl.session
    assert s.customer == "Temple fair"
    assert s.row(ids["tea"]).picked == Numeric(2)
    assert s.drawer.total_cash() == 7000
    # the slot is one-shot
    ctrl.load()
    assert ctrl.session.customer == ""


class _StubPreview:
    shown = []

    def __init__(self, html, doc_name, parent=None):
        self.html = html
        self.doc_name = doc_name

    def show(self):
        _StubPreview.shown.append(self)


def test_print_current_opens_preview(ctrl, ids, monkeypatch):
    import sales_ledger.widgets.print_preview as pp
    _StubPreview.shown = []
    monkeypatch.setattr(pp, "PrintPreview", _StubPreview)
    _fill(ctrl, ids)
    ctrl.print_current()
    (preview,) = _StubPreview.shown
    assert preview.doc_name == "North"
    assert "Tea" in preview.html
    # an unfinished formula stays as typed
    assert ctrl.session.row(ids["juice"]).picked == PendingFormula("=3*")


def test_merge_print_uses_selected_records(ctrl, ids, monkeypatch):
    import sales_ledger.widgets.print_preview as pp
    _StubPreview.shown = []
    monkeypatch.setattr(pp, "PrintPreview", _StubPreview)

    _fill(ctrl, ids, customer="North")
    ctrl.save()
    s = ctrl.session
    s.customer = "South"
    s.commit_row(ids["tea"], "picked", "4")
    ctrl.save()

    class _StubDialog:
        MERGE, CLONE = 1, 2

        def __init__(self, records, parent=None):
            self.records = records
            self.action = self.MERGE

        def exec(self):
            return QDialog.Accepted

        def selected_records(self):
            return list(self.records)

    monkeypatch.setattr(ctl_mod, "MergePrintDialog", _StubDialog)
    ctrl.open_today()
    (preview,) = _StubPreview.shown
    assert "2 / 4" in preview.html


def test_open_today_with_nothing_saved(ctrl, messages):
    ctrl.open_today()
    assert messages[-1][1] == "Nothing saved"
