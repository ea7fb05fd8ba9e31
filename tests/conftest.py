"""
Pytest configuration and shared fixtures.
This file ensures the project root is in sys.path for imports and points the
application at an in-memory SQLite database with every integration mocked.
"""

import os
import sys
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["USE_MOCK_AI"] = "true"
os.environ["USE_MOCK_INSTACART"] = "true"
os.environ["USE_REAL_RECIPES"] = "false"
for _key in ("SPOONACULAR_API_KEY", "INSTACART_API_KEY", "WALMART_API_KEY",
             "KROGER_CLIENT_ID", "KROGER_CLIENT_SECRET", "AI_AUTH_TOKEN"):
    os.environ[_key] = ""

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import pytest


@pytest.fixture(autouse=True)
def reset_module_state():
    """Module-level caches and rate-limit windows must not leak between tests"""
    from adapters import spoonacular_adapter
    from services import ai_service, pricing_service

    ai_service.reset_state()
    pricing_service.clear_cache()
    spoonacular_adapter.clear_cache()
    yield
    ai_service.reset_state()
    pricing_service.clear_cache()
    spoonacular_adapter.clear_cache()
