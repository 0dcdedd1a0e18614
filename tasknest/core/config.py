from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from urllib.parse import quote_plus
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "TaskNest"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "tasknest"
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: str = "tasknest"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None
    AUTO_CREATE_TABLES: bool = True

    # Session cookies (plaintext email identity)
    SESSION_COOKIE_NAME: str = "userEmail"
    USER_ID_COOKIE_NAME: str = "userId"
    SESSION_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7
    LEGACY_SESSION_COOKIE_NAMES: List[str] = ["user-email", "auth-token"]

    # Seeded admin account
    ADMIN_EMAIL: str = "admin@gmail.com"
    ADMIN_PASSWORD: str = "123456"
    ADMIN_NAME: str = "admin"
    SEED_ADMIN_ON_STARTUP: bool = True

    # Passwords
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Profile pictures
    AVATAR_MAX_BYTES: int = 5 * 1024 * 1024
    AVATAR_ALLOWED_TYPES: List[str] = ["image/jpeg", "image/jpg", "image/png", "image/gif"]
    AVATAR_MAX_DATA_URL_LENGTH: int = 65000

    # Reminders / categories
    DEFAULT_CATEGORY_COLOR: str = "#3B82F6"
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Timezone configuration (used for user-facing dates)
    DEFAULT_TIMEZONE: str = "UTC"

    # CORS
    CORS_ORIGINS: List[str] = []

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "server.log"

    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            safe_user = quote_plus(self.POSTGRES_USER)
            server = f"{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            if self.POSTGRES_PASSWORD:
                safe_password = quote_plus(self.POSTGRES_PASSWORD)
                self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}:{safe_password}@{server}"
            else:
                self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}@{server}"

        if self.BCRYPT_ROUNDS < 4 or self.BCRYPT_ROUNDS > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        if self.DEFAULT_PAGE_SIZE > self.MAX_PAGE_SIZE:
            raise ValueError("DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")
        return self

    # Environment-specific properties
    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT == Environment.STAGING

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def debug_mode(self) -> bool:
        return self.is_development

    @property
    def secure_cookies(self) -> bool:
        return self.is_production

    @property
    def cors_origins_development(self) -> List[str]:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]

    @property
    def allowed_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS:
            return self.CORS_ORIGINS
        if self.is_production:
            return []
        return self.cors_origins_development

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", extra='ignore')


settings = Settings()
