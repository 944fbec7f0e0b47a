import logging
import sys
import types
from typing import Any

from loguru import logger

from config.app_settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# transport and store libraries are chatty at DEBUG
NOISY_LOGGERS: dict[str, str] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "redis": "WARNING",
    "asyncio": "WARNING",
}


def configure_loguru(level: str | None = None, sink: Any = None) -> None:
    effective_level = (level or settings.LOG_LEVEL).upper()
    logger.remove()
    logger.configure(
        handlers=[  # type: ignore
            {
                "sink": sink or sys.stdout,
                "level": effective_level,
                "format": LOG_FORMAT,
                "colorize": sink is None,
            },
        ]
    )

    for logger_name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(logger_name).setLevel(noisy_level)
    logging.basicConfig(handlers=[InterceptHandler(effective_level)], level=0, force=True)


class InterceptHandler(logging.Handler):
    """Forwards stdlib ``logging`` records (httpx, redis) into loguru."""

    def __init__(self, min_level: int | str = 0) -> None:
        super().__init__()
        self.min_level = _resolve_level(min_level)

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < self.min_level:
            return
        try:
            loguru_level: str | int = logger.level(record.levelname).name
        except ValueError:
            loguru_level = record.levelno

        frame: types.FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(loguru_level, record.getMessage())


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level

    resolved = logging.getLevelNamesMapping().get(level.upper())
    if isinstance(resolved, int):
        return resolved

    raise ValueError(f"Unknown log level: {level}")
