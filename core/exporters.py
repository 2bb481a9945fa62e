"""
Output surfaces for abstract tables: HTML fragments and Excel workbooks.
Style tags become "acjp-" CSS classes in HTML.
"""
from datetime import datetime
from itertools import groupby
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.config import get_settings
from core.exceptions import ExportError
from core.logger import setup_logger
from core.schema import (
    TAG_CENTER,
    TAG_CLASSIC_JOURNAL,
    TAG_LEDGER,
    TAG_LEDGER_ACCOUNT_NAME,
    TAG_MODERN_JOURNAL,
    TAG_NAME,
    TAG_NOT_BALANCED,
    TAG_NUMBER,
    TAG_SEPARATOR,
    AbstractTable,
    BlockResult,
)

logger = setup_logger(__name__)

CSS_PREFIX = "acjp-"
ERROR_CLASS = CSS_PREFIX + "error"

# Class order in the generated markup
TAG_ORDER = (
    TAG_CLASSIC_JOURNAL,
    TAG_MODERN_JOURNAL,
    TAG_LEDGER,
    TAG_NOT_BALANCED,
    TAG_NAME,
    TAG_LEDGER_ACCOUNT_NAME,
    TAG_SEPARATOR,
    TAG_CENTER,
    TAG_NUMBER,
)

templates_dir = Path(__file__).parent.parent / "templates"
_environment = Environment(
    loader=FileSystemLoader(str(templates_dir)),
    autoescape=select_autoescape(["html"]),
)


def css_classes(tags: Iterable[str]) -> str:
    """
    Convert style tags into a space separated "acjp-" class list.

    Args:
        tags: Style tags of a table or a cell

    Returns:
        Class attribute value (empty when there are no tags)
    """
    tags = set(tags)
    ordered = [tag for tag in TAG_ORDER if tag in tags]
    ordered += sorted(tags - set(TAG_ORDER))
    return " ".join(CSS_PREFIX + tag for tag in ordered)


def _row_context(row) -> List[Dict[str, Any]]:
    return [
        {"text": cell.text, "span": cell.span, "css": css_classes(cell.style_tags)}
        for cell in row.cells
    ]


def table_to_html(table: AbstractTable) -> str:
    """
    Render an abstract table as an HTML ``<table>`` fragment.

    Head rows go into ``<thead>``; body rows get one ``<tbody>`` per group.
    """
    head_rows = [_row_context(row) for row in table.rows if row.section == "head"]
    body_rows = [row for row in table.rows if row.section == "body"]
    body_groups = [
        [_row_context(row) for row in rows]
        for _, rows in groupby(body_rows, key=lambda row: row.group)
    ]

    template = _environment.get_template("table.html")
    return template.render(
        table_class=css_classes(table.style_tags),
        head_rows=head_rows,
        body_groups=body_groups,
    )


def error_to_html(message: str) -> str:
    """Render an error placeholder shown instead of a table."""
    return _environment.get_template("error.html").render(message=message)


def block_to_html(result: BlockResult) -> str:
    """Render a block result as its table or its error placeholder."""
    if result.table is None:
        return error_to_html(result.error or "")
    return table_to_html(result.table)


def table_to_dataframe(table: AbstractTable) -> pd.DataFrame:
    """
    Flatten an abstract table into a DataFrame.

    A cell spanning n columns fills its first column; the other n-1 stay blank.
    """
    width = table.width
    records = []
    for row in table.rows:
        values: List[str] = []
        for cell in row.cells:
            values.append(cell.text)
            values.extend([""] * (cell.span - 1))
        values.extend([""] * (width - len(values)))
        records.append(values)

    return pd.DataFrame(records, columns=list(range(width)))


def export_to_excel(results: List[BlockResult], output_path: str) -> str:
    """
    Export rendered blocks to an Excel workbook, one sheet per block.

    Spanned cells are merged; failed blocks get a sheet with their error.

    Args:
        results: Block results in document order
        output_path: Output file path

    Returns:
        Path to created file

    Raises:
        ExportError: If there is nothing to export or writing fails
    """
    if not results:
        raise ExportError("No blocks to export", details={"output_path": output_path})

    logger.info(f"Exporting {len(results)} blocks to {output_path}")

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
            workbook = writer.book
            center_format = workbook.add_format({"align": "center", "bold": True})
            error_format = workbook.add_format({"font_color": "red"})

            for index, result in enumerate(results, start=1):
                sheet_name = f"{index} {result.kind}"

                if result.table is None:
                    pd.DataFrame([[result.error or ""]]).to_excel(
                        writer, sheet_name=sheet_name, index=False, header=False
                    )
                    writer.sheets[sheet_name].set_column(0, 0, 80, error_format)
                    continue

                df = table_to_dataframe(result.table)
                df.to_excel(writer, sheet_name=sheet_name, index=False, header=False)
                worksheet = writer.sheets[sheet_name]

                for row_idx, row in enumerate(result.table.rows):
                    col_idx = 0
                    for cell in row.cells:
                        if cell.span > 1:
                            worksheet.merge_range(
                                row_idx, col_idx, row_idx, col_idx + cell.span - 1,
                                cell.text, center_format
                            )
                        col_idx += cell.span

                # Auto-fit columns (approximate)
                for col in df.columns:
                    max_len = df[col].astype(str).map(len).max() if len(df) else 0
                    worksheet.set_column(col, col, min(max_len + 2, 50))

        logger.info(f"Successfully exported to {output_path}")
        return output_path

    except Exception as e:
        logger.error(f"Failed to export Excel: {e}")
        raise ExportError(
            "Failed to export to Excel",
            details={"output_path": output_path, "error": str(e)}
        )


def create_output_filename(base_path: Optional[str] = None) -> str:
    """
    Create timestamped output filename.

    Args:
        base_path: Base directory path (defaults to configured export path)

    Returns:
        Full output file path
    """
    if base_path is None:
        base_path = get_settings().export_path

    Path(base_path).mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    filename = f"journal_tables_{timestamp}.xlsx"

    return str(Path(base_path) / filename)
