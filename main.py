"""
Main entry point for the accounting journal renderer.

    python main.py                      # start the API server
    python main.py rewrite notes.md     # replace acj/acjm/acl blocks in place
"""
import argparse
import sys
from pathlib import Path

# Add project root to Python path for module imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

from core.config import get_settings
from core.exceptions import ConfigurationError
from core.logger import setup_logger

# Load environment variables from .env file
_env_file = PROJECT_ROOT / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

logger = setup_logger(__name__)


def serve() -> None:
    """Start the FastAPI server."""
    settings = get_settings()
    settings.ensure_directories()

    import uvicorn
    from app.api import app

    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Comma as decimal: {settings.comma_as_decimal}")
    logger.info(f"Journal separator: {settings.journal_separator!r}")
    logger.info(f"Account equivalence file: {settings.account_equivalence_path or '(none)'}")
    logger.info(f"Starting server on {settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


def rewrite(path: str, output: str = None) -> None:
    """Rewrite a markdown file, replacing accounting blocks with HTML tables."""
    from services.document_service import DocumentService

    source = Path(path)
    if not source.is_file():
        raise ConfigurationError(f"File not found: {path}", details={"path": path})

    rewritten = DocumentService().rewrite_document(source.read_text(encoding="utf-8"))
    target = Path(output) if output else source
    target.write_text(rewritten, encoding="utf-8")
    logger.info(f"Rewrote {source} -> {target}")


def main(argv=None):
    """Main application entry point."""
    parser = argparse.ArgumentParser(description="Render accounting journal and ledger blocks")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Start the API server (default)")
    rewrite_parser = subparsers.add_parser("rewrite", help="Replace blocks of a markdown file with HTML")
    rewrite_parser.add_argument("path", help="Markdown file")
    rewrite_parser.add_argument("-o", "--output", help="Write here instead of in place")
    args = parser.parse_args(argv)

    try:
        if args.command == "rewrite":
            rewrite(args.path, args.output)
        else:
            serve()

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Failed to run: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
