"""
Pydantic models for request/response validation.
"""
from typing import Optional
from pydantic import BaseModel, Field, StrictStr, field_validator


class PasteCreate(BaseModel):
    """Schema for creating a new paste."""
    content: Optional[StrictStr] = Field(None, min_length=1, description="Text content (required, non-blank)")
    ttl_seconds: Optional[int] = Field(None, ge=1, description="Optional TTL in seconds")
    max_views: Optional[int] = Field(None, ge=1, description="Optional view limit")

    @field_validator("ttl_seconds", "max_views", mode="before")
    @classmethod
    def json_number_only(cls, value):
        """Reject booleans and numeric strings; 10.0 still passes as 10."""
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise ValueError("must be an integer")
        return value


class PasteResponse(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Paste ID")
    url: str = Field(..., description="Shareable URL to view the paste")


class PasteView(BaseModel):
    """Schema for viewing/fetching a paste."""
    content: str = Field(..., description="Paste text content")
    remaining_views: Optional[int] = Field(None, description="Views left (null if unlimited)")
    expires_at: Optional[str] = Field(None, description="Expiry timestamp (ISO 8601, null if no TTL)")


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str = Field(..., description="Machine-readable error code")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the storage engine reachable?")
