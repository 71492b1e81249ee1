from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./tinylink.db"
    DB_TIMEOUT: int = 30  # seconds, passed to the driver as busy/connect timeout

    # Short codes
    CODE_LENGTH: int = 6  # hex characters, must be even

    # HTTP
    SERVICE_NAME: str = "TinyLink"
    API_PREFIX: str = ""
    CORS_ORIGINS: List[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
