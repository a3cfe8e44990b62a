from typing import Any

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    version: str = Field(description="API version")
    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current timestamp")
    pending_notifications: int = Field(description="Outbound notifications still in flight")
    cache: dict[str, Any] = Field(description="Cache backend health")
