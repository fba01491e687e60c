# src/sheetscan/routes/upload.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from ..exceptions import ExtractionError
from ..models import ErrorResponse, HealthResponse, IndexResponse, UploadResponse
from ..services.extraction_client import ExtractionClient
from ..utils.upload import save_upload, single_upload, validate_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sheet_extraction"])


def get_extraction_client(fastapi_request: Request) -> ExtractionClient:
    """The Gemini client built at startup and attached to the app."""
    extraction_client = getattr(fastapi_request.app.state, "extraction_client", None)
    if extraction_client is None:
        logger.error("Extraction client not available in app state")
        raise HTTPException(status_code=503, detail="Extraction client not initialized")
    return extraction_client


@router.get("/", response_model=IndexResponse)
async def index():
    """Root endpoint for the API."""
    return {
        "message": "Sheet extraction API",
        "version": "1.0.0",
        "endpoints": {
            "/": "GET - Root endpoint",
            "/upload": "POST - Upload an image or PDF of a table",
            "/health": "GET - Health check"
        }
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(fastapi_request: Request):
    """Reports whether an extraction client is attached to the app."""
    extraction_client = getattr(fastapi_request.app.state, "extraction_client", None)
    if extraction_client is None:
        return {"status": "unhealthy", "model": None}
    return {"status": "healthy", "model": extraction_client.model_name}


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_file(
    fastapi_request: Request,
    files: Optional[List[UploadFile]] = File(None, alias="file"),
    extraction_client: ExtractionClient = Depends(get_extraction_client),
):
    """
    Store an uploaded table image or PDF and return the records Gemini extracts from it.
    """
    config = fastapi_request.app.state.config

    file = single_upload(files)
    content = await validate_upload(file, config.MAX_FILE_SIZE)
    uploaded = await save_upload(file, content, config.UPLOAD_DIR)

    logger.info(f"📄 {uploaded.kind} received: {uploaded.original_name}")
    logger.info(f"   Size: {uploaded.size / 1024:.2f} KB")

    try:
        records = await extraction_client.extract(uploaded.path, uploaded.mime_type)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to process the file: {e}") from e

    logger.info("Processing completed")

    return {
        "success": True,
        "message": "File processed successfully",
        "filename": uploaded.filename,
        "originalname": uploaded.original_name,
        "recordsExtracted": len(records),
        "data": records,
    }
