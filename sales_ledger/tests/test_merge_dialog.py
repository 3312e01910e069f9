from sales_ledger.modules.ledger.merge import SaleLine, SaleRecord
from sales_ledger.modules.sales.merge_dialog import MergePrintDialog


def _records():
    return [
        SaleRecord("SL20261019-0001", "North", "CASH", "2026-10-19 09:05:00", (SaleLine(1, picked=3),), 90),
        SaleRecord("SL20261019-0002", "South", "CREDIT", "2026-10-19 13:40:00", (), 0),
    ]


def test_model_columns(qtbot):
    dlg = MergePrintDialog(_records())
    qtbot.addWidget(dlg)
    m = dlg.model
    assert m.rowCount() == 2
    assert [m.index(0, c).data() for c in range(m.columnCount())] == ["09:05", "North", "Cash", 1, "90"]
    assert m.index(1, 2).data() == "Credit"


def test_selection_drives_buttons_and_keeps_list_order(qtbot):
    dlg = MergePrintDialog(_records())
    qtbot.addWidget(dlg)
    assert not dlg.btn_merge.isEnabled()
    assert not dlg.btn_clone.isEnabled()

    dlg.table.selectRow(1)
    assert dlg.btn_clone.isEnabled()
    dlg.table.selectRow(0)
    assert dlg.btn_merge.isEnabled()
    assert not dlg.btn_clone.isEnabled()
    assert [r.customer for r in dlg.selected_records()] == ["North", "South"]

    dlg.btn_clear.click()
    assert dlg.selected_records() == []
    assert not dlg.btn_merge.isEnabled()


def test_merge_button_accepts_with_action(qtbot):
    dlg = MergePrintDialog(_records())
    qtbot.addWidget(dlg)
    dlg.table.selectRow(0)
    dlg.btn_merge.click()
    assert dlg.action == MergePrintDialog.MERGE
    assert dlg.result() == MergePrintDialog.Accepted
