"""
API response models.

Pydantic models for OpenAPI schema generation. The register endpoint
takes form fields, so there is no request body model.
"""

from pydantic import BaseModel


class RegisterErrorResponse(BaseModel):
    """Registration refused with a user-facing message."""

    error: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
