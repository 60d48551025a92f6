"""
Application settings
Managed through environment variables and the project .env file
"""
from pydantic_settings import BaseSettings
from pathlib import Path


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = "sqlite:///./deskbook.db"

    # JWT
    secret_key: str = "your-secret-key-here-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 12

    # Application
    app_name: str = "Desk & Parking Booking"
    debug: bool = False
    log_level: str = "INFO"

    # Upper bound on dates accepted by one bulk request (about two months)
    max_bulk_dates: int = 62

    # CORS
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:8080"]

    class Config:
        # resolve .env from the project root regardless of the working directory
        env_file = str(Path(__file__).resolve().parents[1] / ".env")
        case_sensitive = False


settings = Settings()
