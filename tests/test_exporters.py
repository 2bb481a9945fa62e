"""
Unit tests for HTML and Excel output.
"""
from pathlib import Path

from openpyxl import load_workbook
import pytest

from core.exceptions import ExportError
from core.exporters import (
    block_to_html,
    create_output_filename,
    css_classes,
    error_to_html,
    export_to_excel,
    table_to_dataframe,
    table_to_html,
)
from core.rendering import transform_block
from core.schema import BlockResult

PURCHASE = "2024-03-15,Purchase of goods\n600-1000\n472-210\n---\n400-1210\n"
RENT = "2024-01-01,Pay rent\n600-100\n---\n101-200\n"


def test_css_classes_order():
    assert css_classes({"center", "separator"}) == "acjp-separator acjp-center"
    assert css_classes({"not-balanced", "table"}) == "acjp-table acjp-not-balanced"
    assert css_classes({"name", "ledger-account-name"}) == "acjp-name acjp-ledger-account-name"
    assert css_classes(set()) == ""


def test_css_classes_unknown_tags_last():
    assert css_classes({"zeta", "number", "alpha"}) == "acjp-number acjp-alpha acjp-zeta"


def test_classic_table_html():
    html = table_to_html(transform_block("acj", PURCHASE, separator="a"))

    assert html.startswith('<table class="acjp-table">')
    assert html.rstrip().endswith("</table>")
    assert '<thead>\n<tr><td colspan="5" class="acjp-center">2024-03-15</td></tr>\n</thead>' in html
    assert '<td class="acjp-separator acjp-center">a</td>' in html
    assert '<td class="acjp-number">1,000</td>' in html
    assert html.count("<tbody>") == 2


def test_unbalanced_table_html():
    html = table_to_html(transform_block("acj", RENT))
    assert html.startswith('<table class="acjp-table acjp-not-balanced">')


def test_modern_table_html_groups_entries():
    text = "d,x\n1-5\n---\n2-5\n===\n3-1\n---\n4-1\n"
    html = table_to_html(transform_block("acjm", text))

    assert html.startswith('<table class="acjp-modern-table">')
    assert html.count("<tbody>") == 2
    assert '<td colspan="4">d</td>' in html
    assert '<td class="acjp-name acjp-ledger-account-name">2</td>' in html


def test_ledger_table_html():
    html = table_to_html(transform_block("acl", "570\n1\n---\n2\n"))
    assert html.startswith('<table class="acjp-ledger-table">')
    assert '<td class="acjp-number"></td><td class="acjp-number"></td>' in html


def test_html_is_escaped():
    html = table_to_html(transform_block("acj", "2024,<b>bold</b>\n1-1\n---\n2-1\n"))
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "<b>" not in html


def test_error_html():
    assert error_to_html("Bad <input>") == '<div class="acjp-error">Bad &lt;input&gt;</div>'


def test_block_to_html():
    ok = BlockResult(kind="acl", table=transform_block("acl", "570\n1\n---\n2\n"))
    failed = BlockResult(kind="acl", error="Error generating ledger entries: boom", error_type="MissingAccount")

    assert block_to_html(ok).startswith("<table")
    assert block_to_html(failed) == '<div class="acjp-error">Error generating ledger entries: boom</div>'


def test_table_to_dataframe_expands_spans():
    df = table_to_dataframe(transform_block("acjm", PURCHASE))

    assert df.shape == (6, 4)
    assert df.iloc[0].tolist() == ["Particulars", "Ref", "Debit", "Credit"]
    assert df.iloc[1].tolist() == ["2024-03-15", "", "", ""]
    assert df.iloc[5].tolist() == ["Purchase of goods", "", "", ""]


def test_export_to_excel(tmp_path):
    results = [
        BlockResult(kind="acj", table=transform_block("acj", PURCHASE)),
        BlockResult(kind="acl", error="Error generating ledger entries: boom", error_type="MissingAccount"),
    ]
    output_path = str(tmp_path / "out" / "tables.xlsx")

    assert export_to_excel(results, output_path) == output_path
    assert Path(output_path).exists()

    workbook = load_workbook(output_path)
    assert workbook.sheetnames == ["1 acj", "2 acl"]
    journal_sheet = workbook["1 acj"]
    assert journal_sheet["A1"].value == "2024-03-15"
    assert journal_sheet["A2"].value == "1,000"
    assert journal_sheet["B2"].value == "600"
    assert "A1:E1" in {str(merged) for merged in journal_sheet.merged_cells.ranges}
    assert workbook["2 acl"]["A1"].value == "Error generating ledger entries: boom"


def test_export_to_excel_without_blocks(tmp_path):
    with pytest.raises(ExportError):
        export_to_excel([], str(tmp_path / "empty.xlsx"))


def test_create_output_filename(tmp_path):
    path = Path(create_output_filename(str(tmp_path / "exports")))
    assert path.parent == tmp_path / "exports"
    assert path.parent.is_dir()
    assert path.name.startswith("journal_tables_")
    assert path.suffix == ".xlsx"
