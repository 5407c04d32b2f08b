"""FastAPI application for receipt extraction and schedule export.

Endpoints:
- Health and readiness checks for Kubernetes
- Batch receipt extraction into a ledger with per-file diagnostics
- Schedule export (upload or standard template) as an .xlsx download
- Prometheus metrics for monitoring

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import logging
import time

from fastapi import FastAPI, File, HTTPException, Query, Request, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from remittance.api import metrics
from remittance.export.factory import create_exporter
from remittance.export.writer import WorkbookWriter
from remittance.extraction.factory import create_extraction_service
from remittance.pipeline.intake import resolve_media_type
from remittance.pipeline.ledger import Ledger
from remittance.pipeline.models import Diagnostic, Document, NormalizedRecord
from remittance.pipeline.orchestrator import ReceiptBatchProcessor
from remittance.shared.config import get_settings
from remittance.shared.errors import ExportPrecondition, ServiceUnavailable

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Remittance Schedule Builder",
    description="Extract payment receipts and export remittance schedules",
    version=settings.service_version,
)

extraction_service = create_extraction_service(settings)
batch_processor = ReceiptBatchProcessor(settings, extraction_service)
workbook_writer = WorkbookWriter()


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    return response


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    extraction_available: bool


class BatchResponse(BaseModel):
    """Receipt batch response."""

    records: list[NormalizedRecord]
    diagnostics: list[Diagnostic]
    accepted: int
    warnings: int
    errors: int


class ExportRequest(BaseModel):
    """Schedule export request: the ledger records to serialize."""

    records: list[NormalizedRecord]


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe."""
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint for Kubernetes readiness probe."""
    return ReadinessResponse(
        ready=True, extraction_available=batch_processor.extraction_service.is_available()
    )


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint."""
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.post("/api/v1/receipts/extract", response_model=BatchResponse, tags=["Receipts"])
async def extract_receipts(
    files: list[UploadFile] = File(..., description="Receipts (PNG, JPEG, WebP or PDF)"),  # noqa: B008
) -> BatchResponse:
    """Extract a batch of receipts into a deduplicated, date-ordered ledger.

    Every file produces exactly one diagnostic (success, warning or error), in
    upload order. A file that is too large, of the wrong type, unreadable by
    the extraction service or a duplicate is skipped without failing the batch.

    ## Usage Example

    ```bash
    curl -X POST "http://localhost:8000/api/v1/receipts/extract" \\
      -F "files=@receipt1.pdf" -F "files=@receipt2.png"
    ```

    ## Error Handling

    - Returns 400 if no files are provided
    - Returns 503 if no extraction provider is configured (e.g., missing OPENAI_API_KEY)

    Returns:
        Ledger records, diagnostics and per-level counts
    """
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files provided")

    documents = []
    for upload in files:
        content = await upload.read()
        filename = upload.filename or "unnamed"
        metrics.receipt_upload_size_bytes.observe(len(content))
        documents.append(
            Document(
                filename=filename,
                content=content,
                media_type=resolve_media_type(upload.content_type, filename),
            )
        )

    batch_start = time.time()
    try:
        result = await run_in_threadpool(batch_processor.process_batch, documents)
    except ServiceUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    metrics.extraction_batch_duration_seconds.observe(time.time() - batch_start)
    for seconds in result.extraction_seconds:
        metrics.extraction_duration_seconds.observe(seconds)

    for diagnostic in result.diagnostics:
        metrics.receipts_processed_total.labels(status=diagnostic.level).inc()

    return BatchResponse(
        records=list(result.ledger),
        diagnostics=result.diagnostics,
        accepted=len(result.ledger),
        warnings=result.count("warning"),
        errors=result.count("error"),
    )


@app.post("/api/v1/schedules/export", tags=["Schedules"])
def export_schedule(
    request: ExportRequest,
    mode: str = Query("upload", description="Template: 'upload' (portal) or 'standard'"),
) -> Response:
    """Export ledger records as an .xlsx remittance schedule.

    The records are re-sorted by payment date before export. The file name
    comes from the template: a fixed name for uploads, the dominant company
    and tax types for standard schedules.

    ## Error Handling

    - Returns 400 if the record list is empty or the mode is unknown

    Returns:
        The workbook as an attachment
    """
    try:
        exporter = create_exporter(mode)
        artifact = exporter.export(Ledger.finalize(request.records))
    except ExportPrecondition as e:
        metrics.schedules_exported_total.labels(mode=mode, status="rejected").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    content = workbook_writer.to_bytes(artifact)
    metrics.schedules_exported_total.labels(mode=mode, status="success").inc()
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )
