"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="MealPlanner", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings
    database_url: str = Field(
        default="postgresql+psycopg2://user@localhost:5432/mealplanner",
        description="SQLAlchemy database URL (PostgreSQL, or SQLite for local runs)",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Outbound HTTP
    http_timeout_sec: float = Field(
        default=15.0, gt=0, description="Timeout for calls to third-party APIs"
    )

    # Spoonacular recipes
    spoonacular_api_key: Optional[str] = Field(
        default=None, description="Spoonacular API key"
    )
    spoonacular_base_url: str = Field(
        default="https://api.spoonacular.com/recipes",
        description="Spoonacular recipes endpoint",
    )
    use_real_recipes: bool = Field(
        default=False, description="Enrich generated meals with Spoonacular recipes"
    )
    recipe_cache_ttl_sec: int = Field(
        default=3600, ge=0, description="Recipe response cache lifetime"
    )

    # Instacart
    instacart_api_key: Optional[str] = Field(
        default=None, description="Instacart Developer Platform API key"
    )
    use_mock_instacart: bool = Field(
        default=True, description="Return mock Instacart links instead of calling the API"
    )

    # Grocery pricing providers
    kroger_client_id: Optional[str] = Field(default=None, description="Kroger client id")
    kroger_client_secret: Optional[str] = Field(
        default=None, description="Kroger client secret"
    )
    walmart_api_key: Optional[str] = Field(default=None, description="Walmart API key")
    price_cache_ttl_sec: int = Field(
        default=86400, ge=0, description="Ingredient price cache lifetime"
    )

    # AI meal planning (OpenAI proxy)
    functions_url: str = Field(
        default="http://localhost:5001/mealplanner/us-central1",
        description="Base URL of the hosted functions exposing openAIProxy",
    )
    ai_auth_token: Optional[str] = Field(
        default=None, description="Bearer token sent to the AI proxy"
    )
    use_mock_ai: bool = Field(
        default=True, description="Generate plans with the built-in mock meal table"
    )
    ai_max_retries: int = Field(default=3, ge=0, description="AI request retries")
    ai_retry_delay_sec: float = Field(
        default=1.0, ge=0, description="Base delay between AI retries"
    )
    ai_rate_limit_per_minute: int = Field(
        default=10, ge=1, description="AI requests allowed per sliding minute"
    )
    ai_cache_ttl_sec: int = Field(
        default=1800, ge=0, description="AI response cache lifetime"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(
        default="MealPlanner API", description="API documentation title"
    )
    api_description: str = Field(
        default="Household meal planning, grocery lists, pricing and checkout",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
