"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Field names follow the public contract of the service (snake_case keys
original_url / short_url).
"""

from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request body for URL shortening (JSON or urlencoded form)."""
    url: Optional[str] = Field(None, description="The long URL to shorten")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    original_url: str = Field(..., description="The original long URL")
    short_url: int = Field(..., description="The numeric short code")


class ErrorResponse(BaseModel):
    """Body returned for every handled failure."""
    error: str


class HealthResponse(BaseModel):
    status: str
    database: str
    initialized: bool
