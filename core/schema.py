"""
Pydantic models for parsed entries and rendered tables.
Entries are produced by core.parsing and consumed by core.rendering.
"""
from decimal import Decimal
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.numbers import exact_sum

# Code -> display name lookup, read-only once loaded
AccountEquivalence = Dict[str, str]

BlockKind = Literal["acj", "acjm", "acl"]

# Style tags understood by the output surfaces
TAG_CENTER = "center"
TAG_NUMBER = "number"
TAG_NAME = "name"
TAG_SEPARATOR = "separator"
TAG_LEDGER_ACCOUNT_NAME = "ledger-account-name"
TAG_NOT_BALANCED = "not-balanced"
TAG_CLASSIC_JOURNAL = "table"
TAG_MODERN_JOURNAL = "modern-table"
TAG_LEDGER = "ledger-table"


class JournalLine(BaseModel):
    """One account/amount line of a journal entry."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Line amount, never negative")
    account_code: str = Field(..., min_length=1)
    resolved_name: Optional[str] = Field(None, description="Display name from the account table")


class JournalEntry(BaseModel):
    """One debit/credit block of a journal document."""
    model_config = ConfigDict(frozen=True)

    debit_lines: Tuple[JournalLine, ...] = ()
    credit_lines: Tuple[JournalLine, ...] = ()

    @property
    def debit_total(self) -> Decimal:
        return exact_sum(line.amount for line in self.debit_lines)

    @property
    def credit_total(self) -> Decimal:
        return exact_sum(line.amount for line in self.credit_lines)


class FullJournalDocument(BaseModel):
    """
    A parsed journal block: header plus entries.

    ``balanced`` is False as soon as one entry's debit total differs from
    its credit total.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    entries: Tuple[JournalEntry, ...] = ()
    balanced: bool = True


class LedgerEntry(BaseModel):
    """A single account in T-account form."""
    model_config = ConfigDict(frozen=True)

    account: str = Field(..., min_length=1, description='Account code, or "(code) Name" when resolved')
    debit_amounts: Tuple[Decimal, ...] = ()
    credit_amounts: Tuple[Decimal, ...] = ()
    # credit total minus debit total; not rendered
    net_sum: Decimal = Decimal(0)


class TableCell(BaseModel):
    """A rendered cell."""
    model_config = ConfigDict(frozen=True)

    text: str = ""
    span: int = Field(default=1, ge=1)
    style_tags: FrozenSet[str] = frozenset()


class TableRow(BaseModel):
    """A rendered row; ``section`` tells surfaces where the row belongs."""
    model_config = ConfigDict(frozen=True)

    cells: Tuple[TableCell, ...] = ()
    section: Literal["head", "body"] = "body"
    # Rows sharing a group index belong to the same body block
    group: int = 0


class AbstractTable(BaseModel):
    """Renderer output, independent of any UI toolkit."""
    model_config = ConfigDict(frozen=True)

    rows: Tuple[TableRow, ...] = ()
    style_tags: FrozenSet[str] = frozenset()

    @field_validator("rows")
    @classmethod
    def validate_rows(cls, v):
        """Head rows must come before body rows."""
        seen_body = False
        for row in v:
            if row.section == "body":
                seen_body = True
            elif seen_body:
                raise ValueError("Head rows must precede body rows")
        return v

    @property
    def width(self) -> int:
        """Number of columns, taking spans into account."""
        return max((sum(cell.span for cell in row.cells) for row in self.rows), default=0)

    def texts(self) -> List[List[str]]:
        """Cell texts row by row."""
        return [[cell.text for cell in row.cells] for row in self.rows]


class BlockResult(BaseModel):
    """Outcome of rendering one document block: a table or an error message."""
    kind: BlockKind
    table: Optional[AbstractTable] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
