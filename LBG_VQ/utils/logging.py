"""loguru sink for the CLI: one handler, timestamped, no variable dumps."""
import sys
from typing import Optional

from loguru import logger

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
FORMAT = ("<green>{time:HH:mm:ss}</green> | "
          "<level>{level: <8}</level> | "
          "{name}:{line} - <level>{message}</level>")


def init_logger(level: str = "INFO", sink=None,
                colorize: Optional[bool] = None) -> None:
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"log level must be one of {LEVELS}, got {level!r}")
    logger.configure(handlers=[{
        "sink": sink or sys.stdout,
        "level": level,
        "format": FORMAT,
        "colorize": colorize,
        "backtrace": False,
        "diagnose": False,
    }])
