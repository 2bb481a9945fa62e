"""
Projection of parsed entries into abstract tables.

Three styles are supported:
- classic journal: debit amount | debit account | separator | credit account | credit amount
- modern journal: Particulars | Ref | Debit | Credit
- ledger: T-account with debit and credit columns

Every displayed amount goes through core.numbers.format_amount.
"""
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from core.accounts import account_label
from core.config import DEFAULT_JOURNAL_SEPARATOR
from core.logger import setup_logger
from core.numbers import format_amount
from core.parsing import parse_journal, parse_ledger
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
    AccountEquivalence,
    BlockKind,
    FullJournalDocument,
    JournalLine,
    LedgerEntry,
    TableCell,
    TableRow,
)

logger = setup_logger(__name__)

CLASSIC_COLUMNS = 5
MODERN_HEADERS = ("Particulars", "Ref", "Debit", "Credit")


def _cell(text: str = "", *tags: str, span: int = 1) -> TableCell:
    return TableCell(text=text, span=span, style_tags=frozenset(tags))


def _table_tags(base: str, balanced: bool = True) -> frozenset:
    if balanced:
        return frozenset({base})
    return frozenset({base, TAG_NOT_BALANCED})


def _line_label(line: Optional[JournalLine]) -> str:
    if line is None:
        return ""
    return account_label(line.account_code, line.resolved_name)


def _line_amount(line: Optional[JournalLine], use_comma_decimal: bool) -> str:
    if line is None:
        return ""
    return format_amount(line.amount, use_comma_decimal)


def render_classic_journal(
    document: FullJournalDocument,
    use_comma_decimal: bool = False,
    separator: str = DEFAULT_JOURNAL_SEPARATOR
) -> AbstractTable:
    """
    Render a journal as the classic five-column table.

    Debit and credit lines of an entry are paired by position; the
    shorter side is padded with blank cells.

    Args:
        document: Parsed journal
        use_comma_decimal: Format amounts with "," as decimal point
        separator: Glyph placed between the debit and credit accounts

    Returns:
        Abstract table
    """
    rows: List[TableRow] = [
        TableRow(section="head", cells=(_cell(document.date, TAG_CENTER, span=CLASSIC_COLUMNS),))
    ]

    for group, entry in enumerate(document.entries, start=1):
        debits, credits = entry.debit_lines, entry.credit_lines
        for i in range(max(len(debits), len(credits))):
            debit = debits[i] if i < len(debits) else None
            credit = credits[i] if i < len(credits) else None
            rows.append(TableRow(group=group, cells=(
                _cell(_line_amount(debit, use_comma_decimal), TAG_NUMBER),
                _cell(_line_label(debit), TAG_NAME),
                _cell(separator, TAG_SEPARATOR, TAG_CENTER),
                _cell(_line_label(credit), TAG_NAME),
                _cell(_line_amount(credit, use_comma_decimal), TAG_NUMBER),
            )))

    rows.append(TableRow(
        group=len(document.entries) + 1,
        cells=(_cell(document.description, TAG_CENTER, span=CLASSIC_COLUMNS),)
    ))

    return AbstractTable(rows=tuple(rows), style_tags=_table_tags(TAG_CLASSIC_JOURNAL, document.balanced))


def _modern_line_row(line: JournalLine, amount: str, is_credit: bool, group: int) -> TableRow:
    name_tags = (TAG_NAME, TAG_LEDGER_ACCOUNT_NAME) if is_credit else (TAG_NAME,)
    if line.resolved_name:
        particulars, ref = line.resolved_name, line.account_code
    else:
        particulars, ref = line.account_code, ""

    debit_text, credit_text = ("", amount) if is_credit else (amount, "")
    return TableRow(group=group, cells=(
        _cell(particulars, *name_tags),
        _cell(ref, TAG_NAME, TAG_CENTER),
        _cell(debit_text, TAG_NUMBER),
        _cell(credit_text, TAG_NUMBER),
    ))


def render_modern_journal(document: FullJournalDocument, use_comma_decimal: bool = False) -> AbstractTable:
    """
    Render a journal as the four-column Particulars/Ref/Debit/Credit table.

    Each entry gets its own date row, its debit rows, its credit rows and
    a description row.
    """
    rows: List[TableRow] = [
        TableRow(section="head", cells=tuple(_cell(header, TAG_CENTER) for header in MODERN_HEADERS))
    ]
    width = len(MODERN_HEADERS)

    for group, entry in enumerate(document.entries, start=1):
        rows.append(TableRow(group=group, cells=(_cell(document.date, span=width),)))
        for line in entry.debit_lines:
            rows.append(_modern_line_row(line, format_amount(line.amount, use_comma_decimal), False, group))
        for line in entry.credit_lines:
            rows.append(_modern_line_row(line, format_amount(line.amount, use_comma_decimal), True, group))
        rows.append(TableRow(group=group, cells=(
            _cell(document.description, TAG_CENTER, span=2),
            _cell("", span=2),
        )))

    return AbstractTable(rows=tuple(rows), style_tags=_table_tags(TAG_MODERN_JOURNAL, document.balanced))


def render_ledger(ledger: LedgerEntry, use_comma_decimal: bool = False) -> AbstractTable:
    """
    Render a ledger as a two-column T-account.

    Missing positions show a formatted zero, and a blank row closes the
    table.
    """
    zero = Decimal(0)
    debits, credits = ledger.debit_amounts, ledger.credit_amounts

    rows: List[TableRow] = [
        TableRow(section="head", cells=(_cell(ledger.account, TAG_CENTER, span=2),))
    ]
    for i in range(max(len(debits), len(credits))):
        debit = debits[i] if i < len(debits) else zero
        credit = credits[i] if i < len(credits) else zero
        rows.append(TableRow(group=1, cells=(
            _cell(format_amount(debit, use_comma_decimal), TAG_NUMBER),
            _cell(format_amount(credit, use_comma_decimal), TAG_NUMBER),
        )))
    rows.append(TableRow(group=1, cells=(_cell("", TAG_NUMBER), _cell("", TAG_NUMBER))))

    return AbstractTable(rows=tuple(rows), style_tags=_table_tags(TAG_LEDGER))


def _classic(text, table, use_comma_decimal, separator):
    return render_classic_journal(parse_journal(text, table), use_comma_decimal, separator)


def _modern(text, table, use_comma_decimal, separator):
    return render_modern_journal(parse_journal(text, table), use_comma_decimal)


def _ledger(text, table, use_comma_decimal, separator):
    return render_ledger(parse_ledger(text, table), use_comma_decimal)


TRANSFORMS: Dict[str, Callable[..., AbstractTable]] = {
    "acj": _classic,
    "acjm": _modern,
    "acl": _ledger,
}


def transform_block(
    kind: BlockKind,
    text: str,
    table: Optional[AccountEquivalence] = None,
    use_comma_decimal: bool = False,
    separator: str = DEFAULT_JOURNAL_SEPARATOR
) -> AbstractTable:
    """
    Parse and render one block.

    Args:
        kind: "acj" (classic journal), "acjm" (modern journal) or "acl" (ledger)
        text: Raw block text
        table: Account equivalence table, may be empty
        use_comma_decimal: Format amounts with "," as decimal point
        separator: Classic journal separator glyph

    Returns:
        Abstract table

    Raises:
        ParseError: If the block is malformed
        ValueError: If the kind is unknown
    """
    try:
        transform = TRANSFORMS[kind]
    except KeyError:
        raise ValueError(f"Unknown block kind: {kind}")

    result = transform(text, table or {}, use_comma_decimal, separator)
    logger.debug(f"Rendered {kind} block into {len(result.rows)} rows")
    return result
