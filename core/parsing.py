"""
Parser for journal and ledger blocks.

Journal block::

    2024-01-01,Pay rent
    600-1200
    472-252
    ---
    572-1452
    ===
    ...

Ledger block::

    572
    100
    200
    ---
    150

Entries are separated by three or more "=", debit and credit sections by
three or more "-". Journal lines are ``<account code>-<amount>``.
"""
import re
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Optional, Tuple

from core.accounts import account_label, resolve
from core.exceptions import (
    InvalidAmount,
    MalformedEntrySeparator,
    MalformedHeader,
    MalformedLedgerSeparator,
    MalformedLine,
    MissingAccount,
    NegativeAmount,
)
from core.logger import setup_logger
from core.numbers import exact_sum, parse_amount
from core.schema import AccountEquivalence, FullJournalDocument, JournalEntry, JournalLine, LedgerEntry

logger = setup_logger(__name__)

ENTRY_SEPARATOR = re.compile(r"={3,}")
SECTION_SEPARATOR = re.compile(r"-{3,}")
LINE_SEPARATOR = "-"


class BalanceState(NamedTuple):
    """Running balance bookkeeping threaded through the journal entries."""
    debit_total: Decimal = Decimal(0)
    credit_total: Decimal = Decimal(0)
    balanced: bool = True


def fold_balance(state: BalanceState, entry: JournalEntry) -> BalanceState:
    """
    Check one more entry against the running state.

    Once the state is unbalanced it is returned unchanged: later entries
    are neither checked nor added to the totals.
    """
    if not state.balanced:
        return state

    debit, credit = entry.debit_total, entry.credit_total
    return BalanceState(
        debit_total=exact_sum((state.debit_total, debit)),
        credit_total=exact_sum((state.credit_total, credit)),
        balanced=debit == credit,
    )


def check_balance(entries: Iterable[JournalEntry]) -> BalanceState:
    """Fold every entry into a fresh balance state."""
    state = BalanceState()
    for entry in entries:
        state = fold_balance(state, entry)
    return state


def _split_first_line(text: str) -> Tuple[str, str]:
    first_line, _, rest = text.partition("\n")
    return first_line, rest


def _non_empty_lines(block: str) -> List[str]:
    return [line.strip() for line in block.splitlines() if line.strip()]


def parse_header(line: str) -> Tuple[str, str]:
    """
    Split a journal header into date and description at the first comma.

    Raises:
        MalformedHeader: If the date or the description is missing
    """
    date, comma, description = line.partition(",")
    date, description = date.strip(), description.strip()

    if not comma or not date or not description:
        raise MalformedHeader(
            "Invalid journal entry format. The first line should contain the date "
            "and description separated by a comma.",
            details={"header": line}
        )
    return date, description


def parse_journal_line(line: str, table: Optional[AccountEquivalence] = None) -> JournalLine:
    """
    Parse ``<account code>-<amount>`` at the first hyphen.

    Raises:
        MalformedLine: If the account code or the amount is missing
        InvalidAmount: If the amount is not a number
        NegativeAmount: If the amount is below zero
    """
    code, hyphen, amount_text = line.partition(LINE_SEPARATOR)
    code, amount_text = code.strip(), amount_text.strip()

    if not hyphen or not code or not amount_text:
        raise MalformedLine(
            f'Invalid journal entry line format: "{line}". Each line should contain '
            "an account code and an amount separated by a hyphen (-).",
            details={"line": line}
        )

    try:
        amount = parse_amount(amount_text)
    except InvalidAmount:
        raise InvalidAmount(amount_text, line=line)

    if amount < 0:
        raise NegativeAmount(
            f'Negative amount "{amount_text}" in entry: {line}. '
            "Please ensure that amounts are positive numbers.",
            details={"amount": amount_text, "line": line}
        )

    return JournalLine(amount=amount, account_code=code, resolved_name=resolve(code, table))


def parse_journal_entry(block: str, table: Optional[AccountEquivalence] = None) -> JournalEntry:
    """
    Parse one entry made of a debit section and a credit section.

    Raises:
        MalformedEntrySeparator: If the entry doesn't split into exactly two sections
    """
    sections = SECTION_SEPARATOR.split(block)
    if len(sections) != 2:
        raise MalformedEntrySeparator(
            "Invalid journal entry format. Each entry should have a debit and credit "
            "section separated by '---'.",
            details={"sections": len(sections), "entry": block}
        )

    debit_block, credit_block = sections
    return JournalEntry(
        debit_lines=tuple(parse_journal_line(line, table) for line in _non_empty_lines(debit_block)),
        credit_lines=tuple(parse_journal_line(line, table) for line in _non_empty_lines(credit_block)),
    )


def parse_journal(text: str, table: Optional[AccountEquivalence] = None) -> FullJournalDocument:
    """
    Parse a journal block.

    Args:
        text: Raw block text
        table: Account equivalence table used to resolve names

    Returns:
        Parsed journal document

    Raises:
        ParseError: Any subclass, on the first problem found
    """
    header, body = _split_first_line(text)
    date, description = parse_header(header)

    blocks = [block.strip() for block in ENTRY_SEPARATOR.split(body)]
    entries = tuple(parse_journal_entry(block, table) for block in blocks if block)

    state = check_balance(entries)
    if not state.balanced:
        logger.debug(f"Journal '{description}' ({date}) is not balanced")

    return FullJournalDocument(
        date=date,
        description=description,
        entries=entries,
        balanced=state.balanced,
    )


def parse_amount_lines(block: str) -> Tuple[Decimal, ...]:
    """Parse one amount per non-empty line; any sign is accepted."""
    amounts = []
    for line in _non_empty_lines(block):
        try:
            amounts.append(parse_amount(line))
        except InvalidAmount:
            raise InvalidAmount(line, line=line)
    return tuple(amounts)


def parse_ledger(text: str, table: Optional[AccountEquivalence] = None) -> LedgerEntry:
    """
    Parse a ledger (T-account) block.

    Args:
        text: Raw block text
        table: Account equivalence table used to resolve the account name

    Returns:
        Parsed ledger entry

    Raises:
        ParseError: Any subclass, on the first problem found
    """
    header, body = _split_first_line(text)
    code = header.strip()
    if not code:
        raise MissingAccount(
            "Invalid ledger entry format. The first line should contain the account code."
        )

    sections = [section.strip() for section in SECTION_SEPARATOR.split(body)]
    sections = [section for section in sections if section]
    if len(sections) != 2:
        raise MalformedLedgerSeparator(
            "Invalid ledger entry format. Each entry should have a debit and credit "
            "section separated by '---'.",
            details={"account": code, "sections": len(sections)}
        )

    debit_amounts = parse_amount_lines(sections[0])
    credit_amounts = parse_amount_lines(sections[1])

    return LedgerEntry(
        account=account_label(code, resolve(code, table)),
        debit_amounts=debit_amounts,
        credit_amounts=credit_amounts,
        net_sum=exact_sum(credit_amounts + tuple(amount.copy_negate() for amount in debit_amounts)),
    )
