"""
iNote Backend - Shared Response Schemas
=======================================

What:  Error envelope and health check payload shared by all routes.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for 400/409/500 responses.

    Example:
        {
            "error": "validation_error",
            "message": "Unknown role 'bogus'. Must be one of: ['USER', 'ADMIN']",
            "details": {"field": "role"},
            "request_id": "3f9c2a1b"
        }

    404 and 204 responses carry no body.
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    cache: Dict[str, int] = Field(description="Entry count per cache region")
    uptime_seconds: float = Field(description="Seconds since service started")
