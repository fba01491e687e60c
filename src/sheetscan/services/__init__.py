"""
Service layer: the Gemini extraction client and its prompt.
"""

from .extraction_client import ExtractionClient

__all__ = [
    'ExtractionClient',
]
