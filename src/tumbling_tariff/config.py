import os
import sys

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

class Config:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Message language for legality warnings ("he" or "en")
    TARIFF_LANG = os.getenv("TARIFF_LANG", "he")
    WEB_HOST = os.getenv("WEB_HOST", "127.0.0.1")
    WEB_PORT = os.getenv("WEB_PORT", "5000")

    @classmethod
    def validate(cls):
        if cls.TARIFF_LANG not in ("he", "en"):
            raise ValueError(f"TARIFF_LANG must be 'he' or 'en', got {cls.TARIFF_LANG!r}.")
        if not str(cls.WEB_PORT).isdigit():
            raise ValueError(f"WEB_PORT must be an integer, got {cls.WEB_PORT!r}.")


def setup_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a stderr sink at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or Config.LOG_LEVEL).upper())
