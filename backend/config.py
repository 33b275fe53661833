# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    # Tokens live until the next login/refresh; exp is only an upper bound
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12
    DATABASE_URL: str = "sqlite:///./database_catalog.db"

    # Shared directory for product images, served under /uploads
    UPLOAD_DIR: str = "static/uploads"
    NO_IMAGE: str = "noimg.jpg"
    MAX_IMAGE_KB: int = 2048

    # Logout only reports success unless this is switched on
    REVOKE_TOKENS_ON_LOGOUT: bool = False

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
