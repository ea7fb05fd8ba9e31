"""
Shared response models and the error envelope used by the exception handlers.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Error timestamp"
    )


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")


class IntegrationStatus(BaseModel):
    """Whether an upstream integration is live, mocked or unconfigured"""

    configured: bool
    mode: str = Field(..., description="live, mock or disabled")


class IntegrationsResponse(BaseModel):
    environment: str
    integrations: Dict[str, IntegrationStatus]


class RemovedResponse(BaseModel):
    status: str = "ok"
    removed: str


def error_response(code: str, message: str, details: Any = None, **extra) -> dict:
    """Build the JSON body for an error response"""
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    error.update({k: v for k, v in extra.items() if v is not None})
    return {
        "success": False,
        "error": error,
        "timestamp": datetime.utcnow().isoformat(),
    }
