"""
Pydantic models for the SDK bootstrap API responses.

These models provide automatic validation, serialization, and API documentation.
They serve as the boundary between the HTTP surface and internal domain objects.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum

from pydantic import BaseModel, Field

from src.core.domain.entities import InitializationState, InitializationStatus


# Configuration models
class APIConfig(BaseModel):
    """Configuration for FastAPI application."""
    title: str = "SDK Bootstrap API"
    version: str = "1.0.0"
    description: str = "Ordered start-up of third-party mobile SDKs"
    docs_url: str = "/docs"
    redoc_url: str = "/redoc"
    openapi_url: str = "/openapi.json"
    cors_origins: List[str] = ["*"]
    cors_methods: List[str] = ["*"]
    cors_headers: List[str] = ["*"]


class InitializationStatusResponse(BaseModel):
    """Status of the SDK start-up sequence."""
    state: InitializationState
    is_initializing: bool
    is_completed: bool
    steps: Dict[str, bool] = Field(default_factory=dict, description="Per-step success flags in start-up order")
    error: Optional[str] = None

    @classmethod
    def from_status(cls, status: InitializationStatus) -> "InitializationStatusResponse":
        return cls(**status.to_dict())


# Status and Health models
class HealthStatus(str, Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Overall service health."""
    status: HealthStatus
    timestamp: datetime
    version: str
    initialization: InitializationStatusResponse
    config: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error payload returned by exception handlers."""
    error: str
    code: Optional[str] = None
    step: Optional[str] = Field(default=None, description="Start-up step that failed, when one did")
    details: Optional[Dict[str, Any]] = None
