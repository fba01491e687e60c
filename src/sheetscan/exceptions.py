# src/sheetscan/exceptions.py


class ValidationError(Exception):
    """Raised when an upload is rejected before extraction (missing file, bad type, too large)."""

    status_code = 400


class ExtractionError(Exception):
    """Raised when a stored file cannot be turned into extraction records."""

    status_code = 500


class StartupError(Exception):
    """Raised when the application cannot be created, e.g. a required credential is missing."""
