# backend/inventory_tracker/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DATABASE_URL: str = "sqlite:///./inventory_tracker.db"

    # Frontend origin allowed by CORS (the React SPA)
    FRONTEND_URL: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    # Threshold applied to new products when none is given
    LOW_STOCK_DEFAULT: int = 10

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
