from PySide6.QtWidgets import QTableView


class TableView(QTableView):
    def __init__(self, parent=None, *, multi_select: bool = False):
        super().__init__(parent)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.MultiSelection if multi_select else QTableView.SingleSelection)
        self.setEditTriggers(QTableView.NoEditTriggers)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setStretchLastSection(True)

    def selected_rows(self) -> list[int]:
        """Selected row numbers, top to bottom."""
        return sorted(ix.row() for ix in self.selectionModel().selectedRows())
