"""
Upload handling, error handlers and model-response normalization.
"""

from .response_cleaner import clean_model_response
from .upload import UploadedFile, save_upload, single_upload, validate_upload

__all__ = [
    'clean_model_response',
    'UploadedFile',
    'save_upload',
    'single_upload',
    'validate_upload',
]
