from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl, field_validator
import os
from pathlib import Path

# Ensure the SQLite database directory exists
sqlite_db_path = Path("./sqlite_db")
sqlite_db_path.mkdir(exist_ok=True)

class Settings(BaseSettings):
    # Project Info
    PROJECT_NAME: str = "Interpreter Assignment Scheduler"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # Server settings
    PORT: int = int(os.environ.get("PORT", 8000))

    # Testing
    TESTING: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./sqlite_db/app.db")
    SQL_ECHO: bool = False

    # Documentation
    SHOW_DOCS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "app.log"

    # Scheduling defaults
    DEFAULT_TIMEZONE: str = "America/New_York"
    DEFAULT_ASSIGNMENT_TIME: str = "09:00"  # used when a template is applied without a time

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", env_file_encoding="utf-8")

# Global instance
settings = Settings()
