import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def is_enabled(flag: str, default: bool = False) -> bool:
    return os.getenv(flag, str(default)).lower() == "true"


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _log_level(name: str, default: str = "INFO") -> str:
    level = (os.getenv(name, default) or default).strip().upper()
    return level if level in LOG_LEVELS else default


def _csv(name: str) -> List[str]:
    raw = os.getenv(name, "") or ""
    return [x.strip() for x in raw.split(",") if x.strip()]


class Settings:
    """
    Process configuration, read once from the environment (and .env).
    """

    def __init__(self) -> None:
        self.POINTS_VERSION = os.getenv("POINTS_VERSION", "1.0.0")
        self.LOG_LEVEL = _log_level("LOG_LEVEL")
        self.REQUEST_LOGGING = is_enabled("REQUEST_LOGGING", True)
        self.CORS_MODE = (os.getenv("CORS_MODE", "off") or "off").lower()
        self.CORS_ALLOW_ORIGINS = _csv("CORS_ALLOW_ORIGINS")


settings = Settings()
