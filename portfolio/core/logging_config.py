"""
Logging configuration and the log_* helpers used across services and endpoints.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from portfolio.core.config import settings

LOGGER_NAME = "portfolio"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(LOGGER_NAME)

_configured = False


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Configure the application logger once.

    A console handler is always installed. When ``log_dir`` (or
    ``settings.log_dir``) is set, a rotating file handler is added as well.
    """
    global _configured
    if _configured:
        return

    resolved_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logger.setLevel(resolved_level)
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(stream=sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    target_dir = log_dir or settings.log_dir
    if target_dir:
        path = Path(target_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / "portfolio.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True


def _format_context(context: dict[str, Any]) -> str:
    parts = [f"{key}={value}" for key, value in context.items() if value is not None]
    return f" ({', '.join(parts)})" if parts else ""


def log_debug(message: str, **context: Any) -> None:
    logger.debug(f"{message}{_format_context(context)}")


def log_info(message: str, **context: Any) -> None:
    logger.info(f"{message}{_format_context(context)}")


def log_warning(message: str, **context: Any) -> None:
    logger.warning(f"{message}{_format_context(context)}")


def log_error(
    error: BaseException | str,
    request_id: Optional[str] = None,
    user_id: Any = None,
    **context: Any,
) -> None:
    """Log an error, attaching the traceback when given an exception."""
    suffix = _format_context({"request_id": request_id, "user_id": user_id, **context})
    if isinstance(error, BaseException):
        logger.error(
            f"{type(error).__name__}: {error}{suffix}",
            exc_info=(type(error), error, error.__traceback__),
        )
    else:
        logger.error(f"{error}{suffix}")
