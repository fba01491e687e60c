# src/sheetscan/__init__.py
import logging
import os
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config
from .exceptions import ExtractionError, StartupError, ValidationError
from .routes.upload import router as upload_router
from .services.extraction_client import ExtractionClient
from .utils.helper import (
    extraction_error_handler,
    http_exception_handler,
    request_validation_error_handler,
    validation_error_handler,
)

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config=None, extraction_client=None):
    """
    Creates and configures the FastAPI application.

    The Gemini extraction client is built here once, unless one is passed in,
    and attached to ``app.state`` for the routes to use.

    Raises:
        StartupError: If GEMINI_API_KEY is missing and no client was given.
    """
    logger.info("Starting FastAPI application creation...")

    config = config or Config()
    logging.getLogger().setLevel(config.LOG_LEVEL)

    if extraction_client is None:
        try:
            config.validate_gemini_config()
        except ValueError as e:
            raise StartupError(str(e)) from e
        extraction_client = ExtractionClient(
            api_key=config.GEMINI_API_KEY,
            model_name=config.GEMINI_MODEL,
        )

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)

    app = FastAPI(
        title="Sheetscan API",
        description="Turns photos and PDFs of data tables into JSON records using Gemini Vision.",
        version="1.0.0"
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.extraction_client = extraction_client

    app.include_router(upload_router)

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ExtractionError, extraction_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    logger.info(f"Uploads will be stored in: {os.path.abspath(config.UPLOAD_DIR)}")
    logger.info("FastAPI app created and configured successfully.")
    return app
