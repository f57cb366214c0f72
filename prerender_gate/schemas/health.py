"""
Prerender Gate - Health Schema
===============================

What:  Response model for GET /health.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Liveness report for the host process.
    Who:   Returned by GET /health for load balancer and container health checks.

    The rendering service is reported as configured, never contacted: a health
    check must not spend render quota.
    """
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    rendering_service: str = Field(description="Configured rendering service base URL")
    token_configured: bool = Field(description="Whether X-Prerender-Token is sent upstream")
    uptime_seconds: float = Field(description="Seconds since service started")
