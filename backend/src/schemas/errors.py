"""
Error response schemas for API endpoints.

Every handled error is rendered with the same body so clients can branch on the
stable `error` code rather than the message text.
"""
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for service and request validation errors."""

    error: str = Field(description="Stable error code, e.g. 'not_found' or 'conflict'")
    message: str = Field(description="Human-readable summary")
    errors: list[str] = Field(
        default_factory=list,
        description="Per-field messages (validation errors only)",
    )
