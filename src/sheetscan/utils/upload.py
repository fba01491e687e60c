# src/sheetscan/utils/upload.py

import logging
import os
import random
import time
from dataclasses import dataclass
from typing import List, Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
NO_FILE_MESSAGE = "No file was received"


@dataclass
class UploadedFile:
    """A file accepted by the upload endpoint and written to the uploads directory."""
    path: str
    filename: str
    original_name: str
    mime_type: str
    size: int

    @property
    def kind(self) -> str:
        return "PDF" if self.mime_type == PDF_MIME_TYPE else "Image"


def allowed_mime_type(mime_type: Optional[str]) -> bool:
    """Only images and PDFs are accepted."""
    if not mime_type:
        return False
    return mime_type.startswith("image/") or mime_type == PDF_MIME_TYPE


def safe_original_name(original_name: str) -> str:
    """
    Drop any directory part of a client-supplied name so it stays inside the
    uploads directory. Non-ASCII characters are kept.
    """
    name = os.path.basename(original_name.replace("\\", "/")).replace("\x00", "")
    if name in ("", ".", ".."):
        return "upload"
    return name


def generate_stored_filename(original_name: str) -> str:
    """<epoch-ms>-<random-int>-<original-name>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{unique_suffix}-{safe_original_name(original_name)}"


def single_upload(files: Optional[List[UploadFile]]) -> Optional[UploadFile]:
    """
    The one file sent under the upload field, or None when there is none.

    Raises:
        ValidationError: If more than one file was sent.
    """
    if not files:
        return None
    if len(files) > 1:
        logger.warning(f"Received {len(files)} files, only one is allowed")
        raise ValidationError("Only one file can be uploaded per request")
    return files[0]


def _too_large(max_file_size: int) -> ValidationError:
    max_size_mb = max_file_size // (1024 * 1024)
    return ValidationError(f"File is too large (max. {max_size_mb}MB)")


async def validate_upload(file: Optional[UploadFile], max_file_size: int) -> bytes:
    """
    Reject missing, unsupported or oversized uploads.

    Returns the file content.

    Raises:
        ValidationError: With a client-facing message.
    """
    if file is None or not file.filename:
        logger.warning("No file received")
        raise ValidationError(NO_FILE_MESSAGE)

    if not allowed_mime_type(file.content_type):
        logger.warning(f"Unsupported file type: {file.content_type} ({file.filename})")
        raise ValidationError("Only images (PNG, JPG, JPEG) or PDF files are allowed")

    if file.size is not None and file.size > max_file_size:
        logger.warning(f"File size {file.size} bytes exceeds limit of {max_file_size} bytes")
        raise _too_large(max_file_size)

    await file.seek(0)
    content = await file.read()
    if len(content) > max_file_size:
        logger.warning(f"File size {len(content)} bytes exceeds limit of {max_file_size} bytes")
        raise _too_large(max_file_size)

    return content


def _write_file(path: str, content: bytes) -> None:
    with open(path, "wb") as out:
        out.write(content)


async def save_upload(file: UploadFile, content: bytes, upload_dir: str) -> UploadedFile:
    """Write an already validated upload to the uploads directory."""
    os.makedirs(upload_dir, exist_ok=True)
    filename = generate_stored_filename(file.filename)
    path = os.path.join(upload_dir, filename)

    await run_in_threadpool(_write_file, path, content)
    logger.info(f"Stored upload at {path}")

    return UploadedFile(
        path=path,
        filename=filename,
        original_name=file.filename,
        mime_type=file.content_type,
        size=len(content),
    )
