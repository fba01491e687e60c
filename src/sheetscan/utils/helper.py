# src/sheetscan/utils/helper.py

import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..exceptions import ExtractionError, ValidationError
from .upload import NO_FILE_MESSAGE

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Failed to process the file"


async def validation_error_handler(request: Request, exc: ValidationError):
    """Client-side upload problems: 400 with a single error message."""
    logger.warning(f"400 {exc}: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc)},
    )


async def extraction_error_handler(request: Request, exc: ExtractionError):
    """Upstream failures while extracting records: 500 with the underlying message."""
    logger.error(f"500 {exc}: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": EXTRACTION_FAILED_MESSAGE,
            "details": str(exc),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Custom handler for Starlette/FastAPI HTTP exceptions to keep error bodies
    in the same {"error": ...} shape as the upload endpoint.
    """
    logger.warning(f"{exc.status_code} {exc.detail}: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Malformed request bodies, e.g. a text value sent where the upload expects a
    file. Reported as a 400 in the same shape as the other upload errors.
    """
    logger.warning(f"400 invalid request body: {request.method} {request.url.path} - {exc.errors()}")
    file_field_error = any("file" in error.get("loc", ()) for error in exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": NO_FILE_MESSAGE if file_field_error else "Invalid request"},
    )
