# sales_ledger/constants.py
APP_NAME = "Stall Sales Ledger"

DATA_DIR = "data"
DB_FILE_NAME = "sales_ledger.db"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1"

# ---- ledger shape ----
# Banknotes/coins counted in the drawer, largest first (also the sidebar order).
DENOMINATIONS = (1000, 500, 100, 50, 10, 5, 1)

EXPENSE_CATEGORIES = (
    "stall", "cleaning", "electricity", "gas",
    "parking", "goods", "bags", "others",
)
LINE_PAY = "line_pay"        # inbound, offsets the drawer
SERVICE_FEE = "service_fee"  # deduction, applied on its own

# Editable product-grid columns, in navigation order.
GRID_COLUMNS = ("picked", "original", "returns", "price")

DEFAULT_CASH_RESERVE = 5000.0
DEFAULT_CREDIT_RESERVE = 0.0

MERGE_SEPARATOR = " / "

# ---- printing ----
TEMPLATE_DIR_NAME = "resources/templates/print"
DEFAULT_PRINT_TEMPLATE = "daily_sheet"
MERGED_PRINT_TEMPLATE = "merged_sheet"
