"""API error response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: Any | None = None


class ValidationErrorResponse(BaseModel):
    error: str
    details: dict[str, list[str]]


class MessageResponse(BaseModel):
    message: str
