"""
Document processing service.
Resolves per-document options and renders every accounting block of a document.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from core.accounts import load_account_equivalences
from core.config import (
    DEFAULT_COMMA_AS_DECIMAL,
    DEFAULT_JOURNAL_SEPARATOR,
    Settings,
    get_settings,
    resolve_option,
)
from core.document import find_blocks, split_frontmatter
from core.exceptions import AccountEquivalenceLoadError, DataNotFoundError, ParseError
from core.exporters import block_to_html
from core.logger import setup_logger
from core.rendering import transform_block
from core.schema import AccountEquivalence, BlockKind, BlockResult

logger = setup_logger(__name__)

# Frontmatter keys overriding the global settings
COMMA_AS_DECIMAL_KEY = "acj-commaAsDecimal"
JOURNAL_SEPARATOR_KEY = "acj-journalSeparator"
ACCOUNT_EQUIVALENCE_KEY = "acj-accountEquivalence"

ERROR_PREFIXES = {
    "acj": "Error generating journal entries: ",
    "acjm": "Error generating journal entries: ",
    "acl": "Error generating ledger entries: ",
}

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


class RenderOptions(BaseModel):
    """Plain values handed to the core for one document."""
    use_comma_decimal: bool = DEFAULT_COMMA_AS_DECIMAL
    separator: str = DEFAULT_JOURNAL_SEPARATOR
    account_path: Optional[str] = None
    account_table: AccountEquivalence = Field(default_factory=dict)


def _as_bool(value: Any) -> Optional[bool]:
    """Read a frontmatter flag; unrecognised values count as absent."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning(f"Ignoring non-boolean {COMMA_AS_DECIMAL_KEY} value: {value!r}")
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class DocumentService:
    """Service rendering accounting code blocks of markdown documents."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize document service.

        Args:
            settings: Settings to use (defaults to the global settings)
        """
        self.settings = settings or get_settings()
        self._account_tables: Dict[str, AccountEquivalence] = {}

    def get_account_table(self, path: Optional[str]) -> AccountEquivalence:
        """
        Return the account table stored at path, loading it on first use.

        A missing or malformed file yields an empty table so that blocks
        still render with bare account codes.

        Args:
            path: CSV path relative to the documents root, or None

        Returns:
            Code -> name table
        """
        if not path:
            return {}
        if path in self._account_tables:
            return self._account_tables[path]

        try:
            table = load_account_equivalences(path, base_dir=self.settings.documents_root)
        except (AccountEquivalenceLoadError, DataNotFoundError) as e:
            logger.warning(f"Using empty account table: {e.message}")
            return {}

        self._account_tables[path] = table
        return table

    def clear_account_tables(self) -> None:
        """Forget loaded account tables so they are read again."""
        self._account_tables.clear()

    def resolve_options(self, frontmatter: Optional[Mapping[str, Any]] = None) -> RenderOptions:
        """
        Resolve rendering options: document override, then settings, then default.

        Args:
            frontmatter: Document frontmatter

        Returns:
            Options with the account table loaded
        """
        frontmatter = frontmatter or {}

        use_comma_decimal = resolve_option(
            _as_bool(frontmatter.get(COMMA_AS_DECIMAL_KEY)),
            self.settings.comma_as_decimal,
            default=DEFAULT_COMMA_AS_DECIMAL,
        )
        separator = resolve_option(
            _as_text(frontmatter.get(JOURNAL_SEPARATOR_KEY)),
            self.settings.journal_separator,
            default=DEFAULT_JOURNAL_SEPARATOR,
        )
        account_path = resolve_option(
            _as_text(frontmatter.get(ACCOUNT_EQUIVALENCE_KEY)) or None,
            self.settings.account_equivalence_path,
            default=None,
        )

        return RenderOptions(
            use_comma_decimal=use_comma_decimal,
            separator=separator,
            account_path=account_path,
            account_table=self.get_account_table(account_path),
        )

    def render_block(
        self,
        kind: BlockKind,
        source: str,
        options: Optional[RenderOptions] = None
    ) -> BlockResult:
        """
        Render one block, turning a parse failure into an error result.

        Args:
            kind: Block kind ("acj", "acjm" or "acl")
            source: Raw block text
            options: Resolved options (defaults to settings only)

        Returns:
            Block result holding a table or an error message
        """
        options = options or self.resolve_options()

        try:
            table = transform_block(
                kind,
                source,
                options.account_table,
                options.use_comma_decimal,
                options.separator,
            )
        except ParseError as e:
            logger.warning(f"Failed to render {kind} block: {e.message}")
            return BlockResult(
                kind=kind,
                error=ERROR_PREFIXES[kind] + e.message,
                error_type=type(e).__name__,
            )

        return BlockResult(kind=kind, table=table)

    def render_document(self, markdown: str) -> List[BlockResult]:
        """
        Render every accounting block of a document, in order.

        A failing block does not stop the others.
        """
        frontmatter, _ = split_frontmatter(markdown)
        options = self.resolve_options(frontmatter)

        results = [
            self.render_block(block.kind, block.source, options)
            for block in find_blocks(markdown)
        ]
        failed = sum(1 for result in results if not result.ok)
        logger.info(f"Rendered {len(results)} blocks ({failed} failed)")
        return results

    def rewrite_document(self, markdown: str) -> str:
        """
        Replace every accounting block with its rendered HTML.

        Text outside the blocks, frontmatter included, is kept as is.
        """
        frontmatter, _ = split_frontmatter(markdown)
        options = self.resolve_options(frontmatter)

        pieces: List[str] = []
        position = 0
        for block in find_blocks(markdown):
            result = self.render_block(block.kind, block.source, options)
            pieces.append(markdown[position:block.start])
            pieces.append(block_to_html(result))
            position = block.end
        pieces.append(markdown[position:])

        return "".join(pieces)
