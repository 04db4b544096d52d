"""
Configuration module for Pastebin Lite.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_TRUTHY = ("true", "1", "yes")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
        self.REDIS_SOCKET_TIMEOUT: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "5"))
        self.MEMORY_FALLBACK: bool = _env_flag("MEMORY_FALLBACK", "True")
        self.DEBUG: bool = _env_flag("DEBUG", "False")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if self.DEBUG else "INFO").upper()
        # Empty means share links are built from the incoming request
        self.APP_DOMAIN: str = os.getenv("APP_DOMAIN", "")
        self.TEST_MODE: bool = _env_flag("TEST_MODE", "0")


settings = Settings()
