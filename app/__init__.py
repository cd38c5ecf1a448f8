"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and session token verification.
"""

from app.config import settings
from app.exceptions import (
    AppError,
    ServiceValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)

__all__ = [
    "settings",
    "AppError",
    "ServiceValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
]
