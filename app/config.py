"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from enum import Enum
from typing import List, Optional
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
    app_name: str = Field(default="FoodOps", description="Application name")
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
        default="postgresql+psycopg2://user@localhost:5432/foodops",
        description="SQLAlchemy database URL",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=8, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=2.0, ge=0, description="Delay between DB init attempts"
    )

    # Session token verification
    auth_jwt_secret: Optional[str] = Field(
        default=None, description="Shared secret for HS256 session tokens"
    )
    auth_jwks_url: Optional[str] = Field(
        default=None, description="JWKS endpoint for RS256 session tokens"
    )
    auth_issuer: Optional[str] = Field(
        default=None, description="Expected token issuer (skipped when unset)"
    )
    auth_audience: Optional[str] = Field(
        default=None, description="Expected token audience (skipped when unset)"
    )
    auth_jwks_cache_seconds: int = Field(
        default=300, ge=0, description="How long fetched JWKS stay cached"
    )

    # Identity provider webhook
    webhook_secret: Optional[str] = Field(
        default=None, description="Signing secret for identity webhooks (whsec_...)"
    )

    # Company defaults
    invitation_ttl_days: int = Field(
        default=7, ge=1, description="Days before a company invitation expires"
    )
    default_features: List[str] = Field(
        default=["ingredients", "menus", "settings", "mealPlanning"],
        description="Features enabled when a company is created",
    )
    required_features: List[str] = Field(
        default=["ingredients", "menus", "mealPlanning", "cookingPlan", "inventory"],
        description="Features backfilled for existing companies",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=True, description="Allow CORS credentials"
    )
    cors_allow_methods: List[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: List[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="", description="API route prefix")
    api_title: str = Field(default="FoodOps API", description="API documentation title")
    api_description: str = Field(
        default="Multi-tenant kitchen operations: companies, inventory, menus and stock",
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
