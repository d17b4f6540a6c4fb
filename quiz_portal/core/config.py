"""
Application configuration settings
FILE: quiz_portal/core/config.py
"""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # MongoDB Configuration
    mongodb_url: str = "mongodb://localhost:27017"
    database_name: str = "quiz_portal"
    
    # API Configuration
    api_prefix: str = "/api"
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",  # Common React dev port
    ]
    log_level: str = "INFO"
    
    # Session Configuration
    access_code_length: int = 10
    
    class Config:
        env_file = ".env"
        case_sensitive = False  # This allows case-insensitive matching
        extra = "ignore"


settings = Settings()
