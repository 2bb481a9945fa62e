"""
Account code resolution and the account equivalence CSV loader.
"""
from pathlib import Path
from typing import Optional, Union

from core.exceptions import AccountEquivalenceLoadError, DataNotFoundError
from core.logger import setup_logger
from core.schema import AccountEquivalence

logger = setup_logger(__name__)


def resolve(code: str, table: Optional[AccountEquivalence]) -> Optional[str]:
    """
    Look up the display name of an account code.

    Args:
        code: Account code; surrounding whitespace is ignored
        table: Code -> name table (may be empty or None)

    Returns:
        Display name, or None when the code is unknown
    """
    if not table:
        return None
    return table.get(code.strip()) or None


def account_label(code: str, name: Optional[str]) -> str:
    """Return "(code) Name" when a name is known, else the bare code."""
    if name:
        return f"({code}) {name}"
    return code


def parse_account_equivalences(csv_text: str) -> AccountEquivalence:
    """
    Parse a two-column ``code,name`` CSV without header row.

    Blank lines are ignored and fields are trimmed. Later duplicates
    replace earlier ones.

    Args:
        csv_text: CSV content

    Returns:
        Code -> name table

    Raises:
        AccountEquivalenceLoadError: If a line does not hold exactly two non-empty fields
    """
    table: AccountEquivalence = {}

    for line_number, raw_line in enumerate(csv_text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        parts = [part.strip() for part in line.split(",")]
        if len(parts) != 2:
            raise AccountEquivalenceLoadError(
                f'Invalid CSV line: "{line}". Each line must have exactly two columns.',
                details={"line": line_number, "content": line}
            )

        code, name = parts
        if not code or not name:
            raise AccountEquivalenceLoadError(
                f'Invalid CSV line: "{line}". Neither column can be empty.',
                details={"line": line_number, "content": line}
            )

        table[code] = name

    return table


def load_account_equivalences(
    path: Union[str, Path],
    base_dir: Optional[Union[str, Path]] = None
) -> AccountEquivalence:
    """
    Load an account equivalence table from a CSV file.

    Args:
        path: CSV path, relative paths resolved against base_dir
        base_dir: Directory the path must stay within

    Returns:
        Code -> name table

    Raises:
        DataNotFoundError: If the file doesn't exist
        AccountEquivalenceLoadError: If the file is outside base_dir, unreadable or malformed
    """
    csv_path = Path(path)
    if base_dir is not None:
        root = Path(base_dir).resolve()
        csv_path = (root / csv_path).resolve()
        if csv_path != root and root not in csv_path.parents:
            raise AccountEquivalenceLoadError(
                f"Account equivalence file is outside the documents root: {path}",
                details={"path": str(path), "documents_root": str(root)}
            )

    if not csv_path.is_file():
        raise DataNotFoundError(
            f"Account equivalence file not found: {path}",
            details={"path": str(csv_path)}
        )

    try:
        csv_text = csv_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read account equivalence file {csv_path}: {e}")
        raise AccountEquivalenceLoadError(
            f"Unable to read account equivalence file: {path}",
            details={"path": str(csv_path), "error": str(e)}
        )

    table = parse_account_equivalences(csv_text)
    logger.info(f"Loaded {len(table)} account equivalences from {csv_path.name}")
    return table
