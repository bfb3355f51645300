"""
Logging Configuration
Structured logging with JSON output for production and per-request ids
"""

import logging
import sys
from typing import Any, ContextManager

from loguru import logger as loguru_logger

from braincache.core.config import settings


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


REQUEST_ID_HEADER = "X-Request-ID"


def setup_logging() -> None:
    """Setup application logging"""

    # Remove default handler
    loguru_logger.remove()
    loguru_logger.configure(extra={"request_id": "-"})

    if settings.DEBUG:
        # Development: Pretty colored output
        loguru_logger.add(
            sys.stdout,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <magenta>{extra[request_id]}</magenta> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level="DEBUG",
            colorize=True,
        )
    else:
        # Production: Structured JSON output
        loguru_logger.add(
            sys.stdout,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} - {message}",
            level=settings.LOG_LEVEL,
            serialize=True,
        )

    if settings.LOG_FILE:
        loguru_logger.add(
            settings.LOG_FILE,
            rotation="100 MB",
            retention="7 days",
            compression="zip",
            level=settings.LOG_LEVEL,
            serialize=True,
        )

    # Intercept standard logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # Set log levels for third-party libraries
    logging.getLogger("uvicorn").handlers = [InterceptHandler()]
    logging.getLogger("uvicorn.access").handlers = [InterceptHandler()]
    logging.getLogger("fastapi").handlers = [InterceptHandler()]
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a logger instance"""
    return loguru_logger.bind(name=name)


def request_context(request_id: str) -> ContextManager:
    """Tag every log record emitted inside the block with a request id"""
    return loguru_logger.contextualize(request_id=request_id)
