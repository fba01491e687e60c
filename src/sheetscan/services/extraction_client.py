# src/sheetscan/services/extraction_client.py

import base64
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

import google.generativeai as genai
from starlette.concurrency import run_in_threadpool

from ..exceptions import ExtractionError
from ..utils.response_cleaner import clean_model_response
from .prompts import build_extraction_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash-lite"


def file_to_generative_part(path: str, mime_type: str) -> Dict[str, str]:
    """Read a file and return it as an inline base64 payload for Gemini."""
    with open(path, "rb") as f:
        data = f.read()
    return {
        "mime_type": mime_type,
        "data": base64.b64encode(data).decode("utf-8"),
    }


def current_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2025-11-21T08:30:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ExtractionClient:
    """
    Sends a table image or PDF to Gemini and returns the rows it transcribes.

    One instance is created at startup and shared by all requests; it keeps no
    per-request state.
    """

    def __init__(self, api_key: str, model_name: str = DEFAULT_MODEL):
        if not api_key:
            raise ValueError("A Gemini API key is required")
        self.model_name = model_name
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        logger.info(f"Gemini model '{model_name}' initialized successfully.")

    async def extract(self, file_path: str, mime_type: str = "image/jpeg") -> List[Dict[str, Any]]:
        """
        Extract the table rows of an image or PDF.

        Args:
            file_path: Path of the stored upload.
            mime_type: MIME type of the upload.

        Returns:
            List of records, one dict per table row (possibly empty).

        Raises:
            ExtractionError: If the file cannot be read, the API call fails or
                the model answer is not a JSON array.
        """
        try:
            file_kind = "PDF" if "pdf" in mime_type else "image"
            logger.info(f"Processing {file_kind} with Gemini Vision ({self.model_name})...")

            file_part = await run_in_threadpool(file_to_generative_part, file_path, mime_type)
            prompt = build_extraction_prompt(current_timestamp())

            response = await self.model.generate_content_async([prompt, file_part])
            text = response.text
            logger.info("📄 Gemini response received")

            json_text = clean_model_response(text)
            data = json.loads(json_text)

            if not isinstance(data, list):
                raise ValueError(
                    f"expected a JSON array of records, got {type(data).__name__}")

            logger.info(f"Extracted {len(data)} records")
            return data

        except Exception as e:
            logger.error(f"Error while processing file {file_path}: {e}", exc_info=True)
            raise ExtractionError(f"Failed to process the file: {e}") from e
