"""
Structured logging configuration using loguru.
"""
import sys
from typing import Optional
from loguru import logger
from app.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(environment: str, level: Optional[str] = None) -> None:
    """
    Replace loguru's default handler with the application handlers.
    
    Development logs DEBUG and up to stdout; other environments log INFO.
    Production additionally writes a rotating file under logs/.
    """
    logger.remove()
    console_level = level or ("DEBUG" if environment == "development" else "INFO")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if environment == "production":
        logger.add(
            "logs/app.log",
            rotation="500 MB",
            retention="10 days",
            compression="zip",
            format=FILE_FORMAT,
            level="INFO",
        )


configure_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)

__all__ = ["logger", "configure_logging"]
