"""Define utility functions to simplify logging to the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("grasp_generation")
console = Console()


def configure_logging(level: int = logging.INFO) -> None:
    """Route the package's log records through a Rich handler on the shared console."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False


def log_info(message: str) -> None:
    """Log the given string at the INFO level."""
    logger.info(message)


def log_warning(message: str) -> None:
    """Log the given string at the WARNING level."""
    logger.warning(message)
