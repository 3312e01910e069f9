from PySide6.QtWidgets import QDialog, QVBoxLayout, QHBoxLayout, QPushButton, QLabel

from ...widgets.table_view import TableView
from ..ledger.merge import SaleRecord
from .model import TodayRecordsModel


class MergePrintDialog(QDialog):
    """
    Lists today's saved entries. Select several to print them as one
    merged sheet, or exactly one to clone it into a new entry.
    """

    MERGE = 1
    CLONE = 2

    def __init__(self, records: list[SaleRecord], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Today's entries")
        self.resize(560, 420)
        self.action = None

        self.model = TodayRecordsModel(records)
        self.table = TableView(multi_select=True)
        self.table.setModel(self.model)
        self.table.resizeColumnsToContents()

        self.lab_hint = QLabel("Click rows to select; the merged sheet keeps this order.")
        self.lab_hint.setStyleSheet("color: #6b7280;")

        self.btn_clear = QPushButton("Clear selection")
        self.btn_clone = QPushButton("Clone into new entry")
        self.btn_merge = QPushButton("Merge print")
        self.btn_merge.setDefault(True)
        self.btn_cancel = QPushButton("Close")

        btns = QHBoxLayout()
        btns.addWidget(self.btn_clear)
        btns.addStretch(1)
        btns.addWidget(self.btn_clone)
        btns.addWidget(self.btn_merge)
        btns.addWidget(self.btn_cancel)

        lay = QVBoxLayout(self)
        lay.addWidget(self.lab_hint)
        lay.addWidget(self.table, 1)
        lay.addLayout(btns)

        self.btn_clear.clicked.connect(self.table.clearSelection)
        self.btn_merge.clicked.connect(lambda: self._finish(self.MERGE))
        self.btn_clone.clicked.connect(lambda: self._finish(self.CLONE))
        self.btn_cancel.clicked.connect(self.reject)
        self.table.selectionModel().selectionChanged.connect(self._update_buttons)
        self._update_buttons()

    def _update_buttons(self, *_):
        n = len(self.table.selected_rows())
        self.btn_merge.setEnabled(n > 0)
        self.btn_clone.setEnabled(n == 1)

    def _finish(self, action: int):
        self.action = action
        self.accept()

    def selected_records(self) -> list[SaleRecord]:
        return [self.model.at(r) for r in self.table.selected_rows()]
