# src/sheetscan/models.py
"""
Pydantic models for API responses.

Records extracted from a sheet are passed through untouched, so ``data`` is a
list of free-form dicts rather than a typed model.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Response model for a processed upload."""
    success: bool
    message: str
    filename: str
    originalname: str
    recordsExtracted: int
    data: List[Any]

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": "File processed successfully",
                "filename": "1732176000000-482913377-report.png",
                "originalname": "report.png",
                "recordsExtracted": 1,
                "data": [
                    {
                        "_id": "6740a1f2c3b4d5e6f7a8b9c0",
                        "frontLabor": "1910_OB6_TJ-650",
                        "date": "2025-11-21T00:00:00.000Z",
                        "dateString": "2025-11-21",
                        "phase": "mineral",
                        "tonnage": 1250,
                        "state": "active",
                        "shift": "noche",
                        "type": "blending",
                        "day": 21,
                        "month": 11,
                        "year": 2025
                    }
                ]
            }
        }


class ErrorResponse(BaseModel):
    """Response model for rejected uploads and failed extractions."""
    error: str
    details: Optional[str] = None


class IndexResponse(BaseModel):
    """Response model for the root endpoint."""
    message: str
    version: str
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str
    model: Optional[str] = None
