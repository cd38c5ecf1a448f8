"""
Standardized API response models and utilities.
Provides consistent response formatting across all endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")


class SuccessResponse(BaseModel):
    success: bool = True


class DeletedResponse(BaseModel):
    status: str = "ok"
    deleted: str


# OpenAPI documentation for the error bodies shared by authenticated routes
AUTH_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or invalid session token"},
    403: {"model": ErrorResponse, "description": "Caller lacks the required role or feature"},
}

COMPANY_ERRORS = {
    **AUTH_ERRORS,
    404: {"model": ErrorResponse, "description": "Company or resource not found"},
}


def deleted(resource_id) -> DeletedResponse:
    """Body returned by DELETE endpoints"""
    return DeletedResponse(deleted=str(resource_id))
