import pytest

from sales_ledger.modules.ledger.merge import SaleLine, SaleRecord
from sales_ledger.modules.ledger.session import EntrySession
from sales_ledger.modules.sales import printing
from sales_ledger.modules.sales.printing import PrintError, render_print_html, sanitize_filename


@pytest.fixture()
def session(catalog):
    s = EntrySession.from_catalog(catalog, sales_rep="Mei")
    s.customer = "North <market>"
    s.edit_row(1, "picked", 3)
    s.edit_cash(1000, 6)
    s.edit_expense("parking", 60)
    return s


def test_daily_sheet_renders_rows_and_cash_summary(session):
    html = render_print_html(session.print_payload("daily_sheet"))
    assert "Tea" in html and "Juice" in html
    # customer text is escaped
    assert "North &lt;market&gt;" in html
    assert "Drawer net" in html
    assert "Parking" in html


def test_credit_sheet_has_no_drawer_section(session):
    session.set_mode("CREDIT")
    html = render_print_html(session.print_payload("daily_sheet"))
    assert "Drawer net" not in html


def test_merged_sheet_lists_joined_quantities(session):
    recs = [
        SaleRecord("A", "North", "CASH", "2026-10-19 09:00:00", (SaleLine(1, picked=3),)),
        SaleRecord("B", "South", "CASH", "2026-10-19 11:00:00", (SaleLine(1, picked=4),)),
    ]
    html = render_print_html(session.print_payload("merged_sheet", recs))
    assert "3 / 4" in html
    assert "2 sale(s) combined" in html


@pytest.mark.parametrize("template_id", ["missing_sheet", "../secrets", ""])
def test_unknown_or_unsafe_template_raises(session, template_id):
    with pytest.raises(PrintError):
        render_print_html(session.print_payload(template_id))


def test_custom_template_dir(tmp_path, session):
    (tmp_path / "tiny.html").write_text("{{ title }}|{{ rows|length }}", encoding="utf-8")
    html = render_print_html(session.print_payload("tiny"), template_dir=tmp_path)
    assert html == "North &lt;market&gt;|3"


def test_sanitize_filename():
    assert sanitize_filename("North market/10-19") == "North_market_10-19"
    assert sanitize_filename("???").startswith("sheet_")


def test_write_pdf_without_weasyprint(monkeypatch, tmp_path):
    import builtins

    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "weasyprint":
            raise ImportError("no weasyprint here")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    with pytest.raises(PrintError):
        printing.write_pdf("<p>x</p>", tmp_path / "out.pdf")
