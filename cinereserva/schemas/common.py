"""Generic response bodies shared by both services."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Every error response: a single human-readable message."""

    error: str = Field(..., description="Human-readable error message")


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
