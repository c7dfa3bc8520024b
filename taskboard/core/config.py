from pydantic_settings import BaseSettings
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = "sqlite:///./taskboard.db"
    SQL_ECHO: bool = False

    # Project settings
    PROJECT_NAME: str = "Taskboard API"
    API_V1_STR: str = "/api/v1"

    # Frontend origins allowed by CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # Fill an empty database with a few users, projects and tasks on startup
    SEED_SAMPLE_DATA: bool = False

    class Config:
        env_file = ".env"
        # Unrelated variables in .env are ignored instead of rejected.
        extra = "ignore"

def get_settings() -> Settings:
    return Settings()
