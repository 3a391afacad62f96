"""
Application configuration using Pydantic Settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "feedstore"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")
    DEBUG: bool = Field(default=False, description="Debug mode (echoes SQL statements)")

    @field_validator('DEBUG', mode='before')
    @classmethod
    def validate_debug(cls, v):
        """Validate DEBUG field to handle string inputs"""
        if isinstance(v, str):
            return v.lower() in ('true', '1', 'yes', 'on')
        return bool(v)

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./feedstore.db",
        description="SQLAlchemy async database URL (postgresql+asyncpg://... in production)",
    )
    DB_POOL_SIZE: int = Field(default=5, description="Connection pool size (ignored for SQLite)")
    DB_MAX_OVERFLOW: int = Field(default=10, description="Connections allowed above pool size (ignored for SQLite)")
    DB_POOL_RECYCLE: int = Field(default=300, description="Seconds before a pooled connection is recycled")

    # Feeds
    DEFAULT_TIMEZONE: str = Field(
        default="UTC",
        description="Timezone used when a user row carries no valid timezone",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()
