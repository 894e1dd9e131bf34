from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.enums import StorageBackendEnum


BASE_DIR = Path(__file__).resolve().parents[3]


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="APP_", extra="ignore")

    APP_NAME: str = "Junk2Clean API"
    DEBUG: bool = False
    ENV: str = "development"
    CORS_ALLOWED_ORIGINS: str = "http://localhost:8080"

    SESSION_SECRET: str = "change-me"
    SESSION_COOKIE_NAME: str = "sessionId"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_AGE_SECONDS: int = 24 * 60 * 60

    SSE_KEEPALIVE_SECONDS: float = 15.0

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


class DBConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="DB_", extra="ignore")

    HOST: str = "localhost"
    PORT: int = 5432
    NAME: str = "junk2clean"
    USER: str = "postgres"
    PASSWORD: str = ""
    # Full URL override, e.g. sqlite+aiosqlite:///./data/contacts.db
    URL: str | None = None

    def get_url(self) -> str:
        if self.URL:
            return self.URL
        return f"postgresql+asyncpg://{self.USER}:{self.PASSWORD}@{self.HOST}:{self.PORT}/{self.NAME}"


class AdminConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="ADMIN_", extra="ignore")

    USERNAME: str = "admin"
    PASSWORD_HASH: str = ""
    LOGIN_FAILURE_DELAY_SECONDS: float = 1.0


class StorageConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="STORAGE_", extra="ignore")

    BACKEND: StorageBackendEnum = StorageBackendEnum.FILE
    CONTACTS_FILE: str = str(BASE_DIR / "data" / "contacts.json")
    UPLOADS_DIR: str = str(BASE_DIR / "data" / "uploads")
    UPLOADS_URL: str = "/data/uploads"
    MAX_IMAGE_SIZE_MB: int = 5
    MAX_IMAGES: int = 5


APP_CONFIG = AppConfig()
DB_CONFIG = DBConfig()
ADMIN_CONFIG = AdminConfig()
STORAGE_CONFIG = StorageConfig()
