"""
Console logging for CLI commands.
"""
import logging

from rich.logging import RichHandler

from portfolio.core.logging_config import LOGGER_NAME


def setup_cli_logging(command: str, verbose: bool = False) -> logging.Logger:
    """Route the application logger through rich for the duration of a command."""
    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.handlers.clear()
    app_logger.addHandler(RichHandler(show_path=False, rich_tracebacks=True))
    app_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    app_logger.propagate = False
    return app_logger.getChild(f"cli.{command}")
