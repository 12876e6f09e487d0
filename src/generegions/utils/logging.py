"""Logging configuration for generegions.

Console logging goes through rich; an optional file handler always
records DEBUG output.

Example:
    >>> from generegions.utils.logging import setup_logging, get_logger
    >>> setup_logging(verbosity=2)
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

# =============================================================================
# Constants
# =============================================================================

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Rich console format (when using rich handler)
RICH_FORMAT = "%(message)s"

# Log levels by verbosity
VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logging(
    verbosity: int = 1,
    log_file: Path | str | None = None,
    use_rich: bool = True,
) -> None:
    """Configure logging for generegions.

    Args:
        verbosity: Verbosity level (0=warning, 1=info, 2=debug).
        log_file: Optional file to log to.
        use_rich: Use rich for console output.
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)

    logger = logging.getLogger("generegions")
    logger.setLevel(logging.DEBUG if log_file is not None else level)

    # Remove existing handlers
    logger.handlers.clear()

    if use_rich:
        console_handler: logging.Handler = RichHandler(
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
        console_handler.setFormatter(logging.Formatter(RICH_FORMAT))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


# =============================================================================
# Progress Logging
# =============================================================================


class ProgressLogger:
    """Periodic progress messages for long-running loops.

    Example:
        >>> progress = ProgressLogger(logger, total=1000)
        >>> for item in items:
        ...     process(item)
        ...     progress.update()
    """

    def __init__(
        self,
        logger: logging.Logger,
        total: int,
        interval: int = 100,
        description: str = "Processing",
    ) -> None:
        """Initialize progress logger.

        Args:
            logger: Logger to use.
            total: Total number of items.
            interval: Items between log messages.
            description: Description of the operation.
        """
        self.logger = logger
        self.total = total
        self.interval = interval
        self.description = description
        self.count = 0

    def update(self, n: int = 1) -> None:
        """Update progress counter.

        Args:
            n: Number of items completed.
        """
        self.count += n
        if self.count % self.interval == 0 or self.count == self.total:
            pct = 100 * self.count / self.total if self.total > 0 else 100
            self.logger.debug(f"{self.description}: {self.count}/{self.total} ({pct:.1f}%)")


# =============================================================================
# Timing Utilities
# =============================================================================


class Timer:
    """Context manager for timing operations.

    Example:
        >>> with Timer("Processing", logger):
        ...     process_data()
        # Logs: "Processing completed in 1.23s"
    """

    def __init__(self, description: str, logger: logging.Logger | None = None) -> None:
        """Initialize timer.

        Args:
            description: Description of the operation.
            logger: Logger for output (uses print if None).
        """
        self.description = description
        self.logger = logger
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> Timer:
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        """Stop timing and log result."""
        self.elapsed = time.perf_counter() - self.start_time

        message = f"{self.description} completed in {self.elapsed:.2f}s"
        if self.logger:
            self.logger.info(message)
        else:
            print(message)
