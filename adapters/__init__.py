"""
Outbound HTTP adapters. Each module owns one shared ``httpx.Client`` opened by
``connect()`` during application startup and released by ``close()``.
"""

from adapters import (
    spoonacular_adapter,
    instacart_adapter,
    openai_proxy_adapter,
    kroger_adapter,
    walmart_adapter,
)

ALL_ADAPTERS = (
    spoonacular_adapter,
    instacart_adapter,
    openai_proxy_adapter,
    kroger_adapter,
    walmart_adapter,
)

__all__ = [
    "spoonacular_adapter",
    "instacart_adapter",
    "openai_proxy_adapter",
    "kroger_adapter",
    "walmart_adapter",
    "ALL_ADAPTERS",
]
