"""
Logging configuration for the deck tools.

Uses loguru for structured logging with optional file rotation and retention.
"""

import sys
import time
from typing import Optional

from loguru import logger

from config.settings import settings


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging based on settings.

    Sets up:
    - Console output on stderr (stdout is reserved for command output)
    - File output with rotation and retention, when enabled
    - Log levels from configuration

    Args:
        level: Console level override (e.g. "DEBUG" for --verbose)

    Should be called once at application startup.
    """
    console_level = level or settings.log_level

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        level=console_level,
        format="<level>{level: <8}</level> | <level>{message}</level>",
        colorize=None,
    )

    if settings.log_to_file:
        log_dir = settings.logs_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "deck-tools_{time:YYYY-MM-DD}.log",
            level="DEBUG",  # Always log everything to file
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            compression="gz",
        )

    logger.debug("Logging initialized (level={})", console_level)


def get_logger(name: str):
    """Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance

    Example:
        >>> from core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Loaded {} cards", len(cards))
    """
    return logger.bind(module=name)


class log_operation:
    """Context manager for logging operations with timing.

    Example:
        >>> with log_operation("Loading card data", game="marvel"):
        ...     cards = game.load_cards()
        # Logs: "Loading card data [game=marvel] completed in 0.42s"
    """

    def __init__(self, operation: str, **context):
        self.operation = operation
        self.context = context
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        context_str = " ".join(f"{k}={v}" for k, v in self.context.items())
        logger.debug("{} [{}] starting...", self.operation, context_str)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        context_str = " ".join(f"{k}={v}" for k, v in self.context.items())

        if exc_type is None:
            logger.debug(
                "{} [{}] completed in {:.2f}s", self.operation, context_str, duration
            )
        else:
            logger.debug(
                "{} [{}] failed after {:.2f}s: {}",
                self.operation,
                context_str,
                duration,
                exc_val,
            )

        return False  # Don't suppress exceptions
