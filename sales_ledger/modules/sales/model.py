from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...utils.helpers import fmt_money
from ..ledger.merge import SaleRecord


class TodayRecordsModel(QAbstractTableModel):
    HEADERS = ["Time", "Customer", "Mode", "Items", "Total"]

    def __init__(self, rows: list[SaleRecord] | None = None):
        super().__init__()
        self._rows = list(rows or [])

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        r = self._rows[index.row()]
        c = index.column()
        if role == Qt.DisplayRole:
            mapping = [
                (r.created_at or "")[11:16],
                r.customer,
                "Credit" if r.payment_mode == "CREDIT" else "Cash",
                len(r.lines),
                fmt_money(r.total_amount),
            ]
            return mapping[c]
        if role == Qt.TextAlignmentRole and c in (3, 4):
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> SaleRecord:
        return self._rows[row]
