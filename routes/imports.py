"""
Product import API routes.

POST /api/admin/import          start an import (inline or queued)
GET  /api/admin/import/{id}     poll a queued import
POST /api/admin/import/preview  parse a CSV and suggest a mapping
GET  /api/admin/import/fields   mapping targets for the UI
"""

from fastapi import APIRouter, Depends, UploadFile, File
import structlog

from models.auth import AdminSession
from models.product_import import (
    PRODUCT_FIELD_LABELS,
    CsvPreviewResponse,
    ImportJobStatus,
    ImportRequest,
    ImportStartResponse,
    ProductFieldOption,
)
from parsers.csv_parser import parse_csv_preview
from routes.auth import get_current_session
from routes.errors import handle_error
from services.import_job_service import ImportJobService, get_import_job_service
from services.import_service import ImportService, get_import_service

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# ROUTES
# ===================

@router.get("/fields", response_model=list[ProductFieldOption])
async def list_product_fields():
    """List the product fields a CSV column can be mapped to."""
    return [
        ProductFieldOption(value=product_field, label=label)
        for product_field, label in PRODUCT_FIELD_LABELS.items()
    ]


@router.post("/preview", response_model=CsvPreviewResponse)
async def preview_import(
    file: UploadFile = File(..., description="CSV file to import"),
    session: AdminSession = Depends(get_current_session),
):
    """
    Parse a CSV upload for the mapping step.

    Nothing is imported; the client posts the rows back to start the import.

    Raises:
        422: Not a CSV, unreadable, or empty
    """
    logger.info(
        "import_preview_started",
        filename=file.filename,
        user_id=session.user.id
    )

    try:
        content = await file.read()
        preview = parse_csv_preview(content, file.filename)

        return CsvPreviewResponse(
            filename=preview.filename,
            headers=preview.headers,
            rows=preview.rows,
            total=preview.total,
            suggested_mappings=preview.suggested_mappings,
        )

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ImportStartResponse)
def start_import(
    data: ImportRequest,
    session: AdminSession = Depends(get_current_session),
    service: ImportService = Depends(get_import_service),
):
    """
    Start a product import.

    Up to 50 rows (or any size when the job queue is down) are imported
    inline and the result is returned (mode "sync"). Larger imports are
    queued (mode "background"); poll the returned id for status.

    Raises:
        400: Missing rows or mapping, no name column, too many rows
        401: Not signed in
    """
    try:
        return service.start_import(data, session)
    except Exception as e:
        return handle_error(e)


@router.get(
    "/{job_id}",
    response_model=ImportJobStatus,
    response_model_exclude_none=True,
)
async def get_import_status(
    job_id: str,
    session: AdminSession = Depends(get_current_session),
    service: ImportJobService = Depends(get_import_job_service),
):
    """
    Get the status of a queued import.

    Raises:
        401: Not signed in
        404: Job not found
        503: Job queue unavailable
    """
    try:
        return service.get_status(job_id)
    except Exception as e:
        return handle_error(e)
