"""
Markdown document helpers: YAML frontmatter and accounting code blocks.
"""
import re
from typing import Any, Dict, List, NamedTuple, Tuple

import yaml

from core.logger import setup_logger

logger = setup_logger(__name__)

# Fence languages handled by the renderer
BLOCK_KINDS = ("acj", "acjm", "acl")

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
BLOCK_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*(?P<kind>acjm|acj|acl)[ \t]*\r?\n"
    r"(?P<source>.*?)"
    r"^(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)


class CodeBlock(NamedTuple):
    """An accounting code block found in a document."""
    kind: str
    source: str
    start: int
    end: int


def split_frontmatter(markdown: str) -> Tuple[Dict[str, Any], str]:
    """
    Separate YAML frontmatter from the document body.

    Invalid or non-mapping frontmatter is ignored.

    Args:
        markdown: Full document text

    Returns:
        Tuple of (frontmatter mapping, body text)
    """
    match = FRONTMATTER_RE.match(markdown)
    if not match:
        return {}, markdown

    body = markdown[match.end():]
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring invalid frontmatter: {e}")
        return {}, body

    if not isinstance(data, dict):
        return {}, body
    return data, body


def find_blocks(markdown: str) -> List[CodeBlock]:
    """
    Find every ``acj``, ``acjm`` and ``acl`` fenced block.

    Offsets refer to the text passed in and cover the fences themselves.
    """
    return [
        CodeBlock(
            kind=match.group("kind"),
            source=match.group("source"),
            start=match.start(),
            end=match.end(),
        )
        for match in BLOCK_RE.finditer(markdown)
    ]
