"""
Logging configuration and utilities.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional


# Known benign warnings that only add noise to the log output
SUPPRESSED_WARNINGS = (
    "is using incorrect casing",
    "is unrecognized in this browser",
)


class SuppressedWarningsFilter(logging.Filter):
    """Drop log records whose message contains an allow-listed substring."""

    def __init__(self, patterns: Iterable[str] = SUPPRESSED_WARNINGS):
        super().__init__()
        self.patterns = tuple(patterns)

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return not any(pattern in message for pattern in self.patterns)


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "werkzeug", "anthropic", "openai")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure root logging for the CLI entry point and the web app.

    Records go to stdout and, when ``log_file`` is given, to that file
    as well. Both handlers drop the benign noise listed in
    ``SUPPRESSED_WARNINGS``; ``warnings.warn`` output is routed through
    them too.

    Args:
        level: Level name such as ``INFO`` or ``debug``
        log_file: Optional log file path; parent directories are created
        format_string: Record format (defaults to ``DEFAULT_FORMAT``)
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    noise_filter = SuppressedWarningsFilter()
    for handler in handlers:
        handler.addFilter(noise_filter)

    logging.basicConfig(
        level=numeric_level,
        format=format_string or DEFAULT_FORMAT,
        handlers=handlers,
        force=True
    )
    logging.captureWarnings(True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Module logger; call as ``get_logger(__name__)``."""
    return logging.getLogger(name)
