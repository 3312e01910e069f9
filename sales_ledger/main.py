from PySide6.QtWidgets import QApplication, QMainWindow
from PySide6.QtCore import Qt
import argparse
import sys

from .constants import APP_NAME
from .database import get_connection
from .modules.base_module import BaseModule
from .modules.sales import SalesController
from .modules.sales.input_method import InputMethodTracker
from .utils.loggers import get_logger

_log = get_logger(__name__)

# focus ring only while the operator is on the keyboard
_KEYBOARD_QSS = "QLineEdit:focus { border: 2px solid #2563eb; background: #eff6ff; }"


class MainWindow(QMainWindow):
    def __init__(self, conn, module: BaseModule):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(1000, 620)
        self.conn = conn
        self.module = module
        self.setCentralWidget(module.get_widget())

    def closeEvent(self, event):
        if self.conn is not None:
            self.conn.commit()
            self.conn.close()
            self.conn = None
        super().closeEvent(event)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="sales-ledger", description=APP_NAME)
    p.add_argument("--db", help="SQLite database file (default: $SALES_LEDGER_DB or the bundled data dir)")
    p.add_argument("--rep", default="", help="Sales rep name stored with each saved entry")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)

    tracker = InputMethodTracker(app)
    app.installEventFilter(tracker)
    tracker.changed.connect(
        lambda method: app.setStyleSheet(_KEYBOARD_QSS if method == "keyboard" else "")
    )

    conn = get_connection(args.db)
    _log.info("Opened database %s", args.db or "(default)")

    sales = SalesController(conn, sales_rep=args.rep)
    win = MainWindow(conn, sales)
    win.resize(1200, 760)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
