# app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,  # Environment vars are uppercase
        extra="ignore",      # Ignore unexpected vars instead of raising
    )

    # Core application settings
    DATABASE_URL: str
    HOST: str = "0.0.0.0"
    PORT: int = 8101
    DEBUG: bool = False
    SQL_ECHO: bool = False
    ENVIRONMENT: str = "development"
    LOG_FILE: str | None = "app.log"

    # CORS settings
    ALLOWED_ORIGINS: list[str] = ["*"]  # In production, specify actual origins
    ALLOW_CREDENTIALS: bool = True
    ALLOWED_METHODS: list[str] = ["*"]
    ALLOWED_HEADERS: list[str] = ["*"]

    # JWT / session settings
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 720  # 12 hours, one game day
    SESSION_COOKIE_NAME: str = "sim_session"
    SESSION_COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12

    # Seeded administrator (optional)
    DEFAULT_ADMIN_EMAIL: str | None = None
    DEFAULT_ADMIN_PASSWORD: str | None = None
    DEFAULT_ADMIN_NAME: str = "Admin User"

    # Game defaults
    DEFAULT_MIN_REASONING_WORDS: int = 15

    # Local file storage
    UPLOAD_DIR: str = "uploads"
    FILE_CACHE_MAX_AGE: int = 31536000  # one year


def _validate_settings(settings: Settings) -> None:
    """Validate critical application settings."""
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL is required")
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET is required")
    if settings.BCRYPT_ROUNDS < 4:
        raise ValueError("BCRYPT_ROUNDS must be at least 4")

    # Environment-specific validations
    if settings.ENVIRONMENT == "production" and settings.DEBUG:
        print("WARNING: DEBUG is enabled in production. Consider setting DEBUG=False.")
    if settings.ENVIRONMENT == "production" and not settings.SESSION_COOKIE_SECURE:
        print("WARNING: SESSION_COOKIE_SECURE is disabled in production.")


# Initialize settings with error handling
try:
    settings = Settings()
    _validate_settings(settings)
except Exception as e:
    print(f"Error initializing settings: {e}")
    raise
