from sales_ledger.modules.ledger.merge import SaleLine, SaleRecord, join_nonzero, merge
from sales_ledger.modules.ledger.rows import ProductRow
from sales_ledger.modules.ledger.values import Numeric, PendingFormula


def _base():
    return [
        ProductRow(product_id=1, name="Tea", stock=10, original_stock=5, price=Numeric(30)),
        ProductRow(product_id=2, name="Juice", stock=8, original_stock=0, price=Numeric(35)),
        ProductRow(product_id=3, name="Crackers", stock=0, original_stock=4, price=PendingFormula("=6*")),
    ]


def _record(sale_id, customer, *lines):
    return SaleRecord(sale_id=sale_id, customer=customer, payment_mode="CASH",
                      created_at="2026-10-19 09:00:00", lines=tuple(lines))


def test_join_nonzero_drops_zeros_and_blanks():
    assert join_nonzero([3, 0, "", 4]) == "3 / 4"
    assert join_nonzero([0, 0]) == ""
    assert join_nonzero([2.5]) == "2.5"


def test_merge_lists_values_in_record_order():
    a = _record("A", "North", SaleLine(1, picked=3, sold=3, unit_price=30))
    b = _record("B", "South", SaleLine(1, picked=4, returns=1, sold=3, unit_price=28))
    tea = merge(_base(), [a, b])[0]
    assert tea.picked == "3 / 4"
    assert tea.returns == "1"
    assert tea.sold == "3 / 3"
    # first contributing record sets the price
    assert tea.price == "30"


def test_zero_in_one_record_leaves_no_stray_separator():
    a = _record("A", "North", SaleLine(1, picked=3))
    b = _record("B", "South", SaleLine(1, picked=0, original=2))
    tea = merge(_base(), [a, b])[0]
    assert tea.picked == "3"
    assert tea.original == "2"


def test_every_base_row_is_kept_in_base_order():
    a = _record("A", "North", SaleLine(2, picked=1, unit_price=40))
    rows = merge(_base(), [a])
    assert [r.name for r in rows] == ["Tea", "Juice", "Crackers"]
    tea, juice, _ = rows
    assert (tea.picked, tea.sold) == ("", "")
    assert tea.price == "30"         # falls back to the live row
    assert juice.price == "40"


def test_merged_rows_leave_stock_and_subtotal_blank():
    a = _record("A", "North", SaleLine(1, picked=3, sold=3, unit_price=30))
    tea = merge(_base(), [a])[0]
    assert tea.subtotal == ""
    assert tea.stock == 0


def test_merging_no_records_leaves_quantities_blank():
    base = _base()
    rows = merge(base, [])
    assert len(rows) == len(base)
    for row in rows:
        assert (row.picked, row.original, row.returns, row.sold) == ("", "", "", "")
    # with nothing to merge the price falls back to the live row
    assert [r.price for r in rows[:2]] == ["30", "35"]


def test_pending_base_price_shows_blank():
    crackers = merge(_base(), [])[2]
    assert crackers.price == ""


def test_product_ids_match_across_types():
    a = _record("A", "North", SaleLine("1", picked=5))
    assert merge(_base(), [a])[0].picked == "5"
