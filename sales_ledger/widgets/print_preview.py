from PySide6.QtWidgets import QDialog, QVBoxLayout, QToolBar, QTextBrowser, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QKeySequence, QShortcut, QTextDocument
from PySide6.QtPrintSupport import QPrinter, QPrintDialog

from ..modules.sales.printing import PrintError, sanitize_filename, write_pdf


class PrintPreview(QDialog):
    """Shows a rendered print sheet with Print / Save PDF actions."""

    def __init__(self, html_content: str, doc_name: str = "sales_sheet", parent=None):
        super().__init__(parent)
        self.html_content = html_content
        self.doc_name = doc_name
        self.setWindowTitle(f"Print preview: {doc_name}")
        self.resize(820, 900)
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QToolBar()
        layout.addWidget(toolbar)

        print_action = QAction("Print", self)
        print_action.triggered.connect(self.print_sheet)
        toolbar.addAction(print_action)

        pdf_action = QAction("Save PDF…", self)
        pdf_action.triggered.connect(self.save_pdf)
        toolbar.addAction(pdf_action)

        # Add shortcut for Ctrl+P
        print_shortcut = QShortcut(QKeySequence("Ctrl+P"), self)
        print_shortcut.activated.connect(self.print_sheet)

        self.view = QTextBrowser()
        self.view.setHtml(self.html_content)
        layout.addWidget(self.view)

    def print_sheet(self):
        """Print through the system print dialog."""
        printer = QPrinter(QPrinter.HighResolution)
        printer.setDocName(self.doc_name)
        dlg = QPrintDialog(printer, self)
        if dlg.exec() == QPrintDialog.Accepted:
            doc = QTextDocument()
            doc.setHtml(self.html_content)
            doc.print_(printer)

    def save_pdf(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save PDF", f"{sanitize_filename(self.doc_name)}.pdf", "PDF files (*.pdf)"
        )
        if not path:
            return
        try:
            write_pdf(self.html_content, path)
        except PrintError as e:
            QMessageBox.critical(self, "PDF Error", str(e))
