from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod|test

    # Security
    JWT_SECRET: str = Field(default="change-me")
    JWT_ALG: str = Field(default="HS256")
    JWT_EXPIRES_MIN: int = Field(default=60 * 12)

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/app")

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost")

    # Celery / Redis
    REDIS_URL: str = Field(default="redis://redis:6379/0")

    # Imports
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024)
    IMPORT_PREVIEW_ROWS: int = Field(default=10)
    IMPORT_APPLY_ASYNC: bool = Field(default=True)  # False: apply inside the request

    # Client
    API_BASE_URL: str = Field(default="http://localhost:8000")

    # Seed (dev)
    SEED_DEMO: bool = Field(default=True)
    DEMO_USER_EMAIL: str = Field(default="demo@example.com")
    DEMO_USER_PASSWORD: str = Field(default="demo12345")


settings = Settings()
