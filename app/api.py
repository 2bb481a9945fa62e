"""
FastAPI routes for rendering journal and ledger blocks.
Thin API layer over DocumentService.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, Response
from pydantic import BaseModel, Field

from core.config import get_settings
from core.exceptions import ExportError
from core.exporters import block_to_html, create_output_filename, export_to_excel
from core.logger import setup_logger
from core.schema import AbstractTable, BlockKind, BlockResult
from services.document_service import (
    ACCOUNT_EQUIVALENCE_KEY,
    COMMA_AS_DECIMAL_KEY,
    JOURNAL_SEPARATOR_KEY,
    DocumentService,
)

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Accounting Journal Renderer",
    description="Render plain-text journal and ledger entries as tables",
    version="1.0.0"
)

# Service instance
document_service = DocumentService(settings)


class RenderRequest(BaseModel):
    """A single block to render, with optional per-request overrides."""
    kind: BlockKind
    source: str
    comma_as_decimal: Optional[bool] = None
    separator: Optional[str] = None
    account_equivalence: Optional[str] = None
    strict: bool = Field(default=False, description="Answer 422 instead of an error result")


class DocumentRequest(BaseModel):
    """A markdown document containing acj/acjm/acl blocks."""
    markdown: str


class BlockResponse(BaseModel):
    """Rendered block: table and HTML, or the error message."""
    kind: BlockKind
    ok: bool
    table: Optional[AbstractTable] = None
    html: str
    error: Optional[str] = None
    error_type: Optional[str] = None


def to_response(result: BlockResult) -> BlockResponse:
    """Convert a block result into its API representation."""
    return BlockResponse(
        kind=result.kind,
        ok=result.ok,
        table=result.table,
        html=block_to_html(result),
        error=result.error,
        error_type=result.error_type,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "accounting_journal",
        "version": "1.0.0"
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


@app.post("/render", response_model=BlockResponse)
async def render_block(request: RenderRequest):
    """
    Render one block.

    Request overrides take the place of document frontmatter.
    """
    overrides: Dict[str, Any] = {
        COMMA_AS_DECIMAL_KEY: request.comma_as_decimal,
        JOURNAL_SEPARATOR_KEY: request.separator,
        ACCOUNT_EQUIVALENCE_KEY: request.account_equivalence,
    }
    options = document_service.resolve_options(overrides)
    result = document_service.render_block(request.kind, request.source, options)

    if request.strict and not result.ok:
        raise HTTPException(
            status_code=422,
            detail={"error": result.error, "error_type": result.error_type}
        )

    return to_response(result)


@app.post("/render-document", response_model=List[BlockResponse])
async def render_document(request: DocumentRequest):
    """Render every accounting block of a markdown document."""
    return [to_response(result) for result in document_service.render_document(request.markdown)]


@app.post("/rewrite")
async def rewrite_document(request: DocumentRequest):
    """Replace every accounting block of a document with its HTML table."""
    return {"markdown": document_service.rewrite_document(request.markdown)}


@app.post("/export")
async def export_document(request: DocumentRequest):
    """
    Export every accounting block of a document to an Excel workbook.

    Returns:
        The workbook as a file download
    """
    results = document_service.render_document(request.markdown)
    if not results:
        raise HTTPException(status_code=400, detail="Document contains no acj, acjm or acl blocks")

    output_path = create_output_filename(settings.export_path)
    try:
        export_to_excel(results, output_path)
    except ExportError as e:
        logger.error(f"Export failed: {e.message}")
        raise HTTPException(status_code=500, detail=e.message)

    return FileResponse(
        path=output_path,
        filename=Path(output_path).name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
