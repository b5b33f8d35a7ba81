from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Banco de dados
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # Image storage
    STORAGE_DIR: str = "uploads"
    STORAGE_PUBLIC_URL: str = "/media"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Quiz player
    SESSION_TTL_MINUTES: int = 60
    REQUIRE_RESPONSES: bool = False

    ALLOWED_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
