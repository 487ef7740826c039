"""Document Segmentation Python Server"""

import logging
import asyncio
import os
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, UploadFile, File, Query, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rich.console import Console
from rich.logging import RichHandler

from engine.config import EngineConfig
from engine.segmentation_engine import SegmentationEngine
from extractors.segment_extractor import build_segment_rows, extract_segments
from models.segment_types import ExtractSegmentsResponse
from utils.endpoint_decorators import handle_document_upload
from utils.validation import describe_environment

API_VERSION = "1.0.0"
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
DEFAULT_TIMEOUT_SECONDS = 300
MIN_TIMEOUT_SECONDS = 30
MAX_TIMEOUT_SECONDS = 600

logger = logging.getLogger("rich")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the segmentation engine once per process"""
    config = EngineConfig.from_env()
    engine = SegmentationEngine(config)
    app.state.engine = engine
    app.state.max_file_size_mb = config.max_file_size_mb
    logger.info(f"Segmentation engine ready: {engine!r}")
    try:
        yield
    finally:
        engine.close()


app = FastAPI(
    title="Document Segmentation API",
    description="Split uploaded documents into positioned translation segments",
    version=API_VERSION,
    lifespan=lifespan
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "message": "Document Segmentation API",
        "version": API_VERSION,
        "features": [
            "Layout-aware PDF segmentation (lines, paragraphs, geometry, style)",
            "Byte-level fallback for malformed PDFs",
            "Blank-line segmentation for plain text"
        ]
    }

@app.get("/health")
async def health_check():
    """Health check with dependency verification"""
    try:
        import pdfplumber
        import pdfminer
        import pydantic

        return {
            "status": "healthy",
            "version": API_VERSION,
            "features": {
                "structural_parsing": "pdfplumber",
                "fallback_extraction": "regex + zlib",
            },
            "dependencies": {
                "pdfplumber": pdfplumber.__version__,
                "pdfminer": pdfminer.__version__,
                "pydantic": pydantic.VERSION
            },
            "environment": describe_environment()
        }
    except ImportError as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": f"Missing dependency: {str(e)}"
            }
        )

@app.post("/extract-segments", response_model=ExtractSegmentsResponse)
@handle_document_upload
async def extract_document_segments(
    *,
    request: Request,
    file: UploadFile = File(...),
    document_id: Optional[str] = Form(None, description="Owning document id (generated when omitted)"),
    processing_timeout: Optional[int] = Query(DEFAULT_TIMEOUT_SECONDS, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS, description="Processing timeout in seconds")
):
    """
    Split an uploaded document into translation segments.

    **Supported files:**
    - `.pdf`: layout-aware segmentation with position and style data, degrading
      to page text and then byte-level recovery for malformed files
    - `.txt` and any other extension: one segment per blank-line separated block
    - `.docx`: accepted, yields zero segments

    **Returns:**
    - Persistence rows in reading order; zero segments means nothing to translate
    """
    temp_file_path = request.state.temp_file_path
    file_type = request.state.file_type
    document_id = document_id or str(uuid.uuid4())

    logger.info(f"Segmenting {file_type} upload {file.filename} for document {document_id}")

    segments = await extract_segments(temp_file_path, request.app.state.engine, file_type)
    rows = build_segment_rows(document_id, segments)

    logger.info(f"Segmentation complete: {len(rows)} segments")
    return ExtractSegmentsResponse(
        documentId=document_id,
        fileType=file_type,
        segmentCount=len(rows),
        segments=rows
    )

def _configure_server_logging():
    """Configure logging with Rich handler and filters for clean output"""
    console = Console(force_terminal=True)

    # LOG_LEVEL from env, default INFO
    log_level = EngineConfig.from_env().log_level

    class ShutdownFilter(logging.Filter):
        """Filter out shutdown-related log messages"""
        def filter(self, record):
            if record.exc_info and record.exc_info[0] in (KeyboardInterrupt, asyncio.CancelledError):
                return False
            if "CancelledError" in str(record.msg) or "KeyboardInterrupt" in str(record.msg):
                return False
            return True

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=True
    )
    rich_handler.addFilter(ShutdownFilter())

    # Silence everything by default
    logging.basicConfig(level=logging.WARNING, format="%(message)s", handlers=[rich_handler])

    # Allow server startup logs
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    for module_name in ["main", "rich", "engine", "extractors", "processors", "utils"]:
        logging.getLogger(module_name).setLevel(log_level)

    return console

server_console = _configure_server_logging()

if __name__ == "__main__":
    port = int(os.getenv("SEGMENTER_PORT", "8000"))
    server_console.print(f"[bold green]Starting segmentation server on http://localhost:{port}[/bold green]")

    try:
        uvicorn.run("main:app", host="0.0.0.0", port=port, reload=os.getenv("SEGMENTER_RELOAD") == "1", log_config=None)
    except KeyboardInterrupt:
        server_console.print("\n[bold yellow]Server stopped.[/bold yellow]")
