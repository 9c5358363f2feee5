"""
Happy Thoughts API — Shared Response Schemas
==============================================

What:  The response envelope used by every endpoint plus the error, index
       and health payloads.

Envelope convention:
    {"success": true,  "response": <data>, "message": "..."}
    {"success": false, "response": null | [] | {...}, "message": "..."}
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Uniform success wrapper returned by every endpoint."""

    success: bool = Field(default=True)
    response: T
    message: Optional[str] = Field(default=None, description="Human-readable status")


class ErrorResponse(BaseModel):
    """
    What:  Error body for 400/404/409/500 responses.
    Why:   Documented in OpenAPI so clients can parse errors programmatically.
    """
    success: bool = Field(default=False)
    response: Any = Field(default=None)
    message: str = Field(description="Human-readable error description")


class AuthErrorResponse(BaseModel):
    """401 body returned by the bearer token check."""

    message: str
    loggedOut: bool = True


class EndpointInfo(BaseModel):
    path: str
    methods: List[str]


class IndexResponse(BaseModel):
    message: str
    endpoints: List[EndpointInfo]


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for load balancer and container health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
