"""Health check and integration status routes"""

from fastapi import APIRouter
import logging

from adapters import (
    instacart_adapter,
    kroger_adapter,
    openai_proxy_adapter,
    spoonacular_adapter,
    walmart_adapter,
)
from api.responses import HealthResponse, IntegrationsResponse, IntegrationStatus
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("mealplanner.api.health")


def _status(configured: bool, mocked: bool = False) -> IntegrationStatus:
    if mocked:
        mode = "mock"
    elif configured:
        mode = "live"
    else:
        mode = "disabled"
    return IntegrationStatus(configured=configured, mode=mode)


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic health check endpoint"""
    return HealthResponse(status="ok", service=settings.app_name, version=settings.app_version)


@router.get("/health/integrations", response_model=IntegrationsResponse)
def integrations():
    """Which upstream APIs are live, mocked or missing credentials"""
    return IntegrationsResponse(
        environment=settings.environment.value,
        integrations={
            "spoonacular": _status(
                spoonacular_adapter.is_configured(),
                mocked=not settings.use_real_recipes,
            ),
            "instacart": _status(
                instacart_adapter.is_configured(),
                mocked=settings.use_mock_instacart,
            ),
            "ai": _status(openai_proxy_adapter.is_configured(), mocked=settings.use_mock_ai),
            "kroger": _status(kroger_adapter.is_configured()),
            "walmart": _status(walmart_adapter.is_configured()),
        },
    )
