"""
hpcreport - Convert Haskell Program Coverage (HPC) data into Codecov JSON and LCOV.

This module owns the Loguru logger configuration shared by every component of
the conversion pipeline. Sinks are tracked in a small state object so tests can
reset and reconfigure logging without leaking handlers between runs.
"""

__version__ = "0.1.0"

import sys
import os
from pathlib import Path
from typing import Optional, Dict, Union, TextIO
from loguru import logger


# --- Logger Configuration Classes and Types ---

class LoggingConfigError(Exception):
    """Exception raised when logging configuration fails validation or setup."""
    pass


class LoggerState:
    """
    Tracks the sinks installed by this package.

    Keeping the sink ids around lets ``reset_logging`` remove exactly what was
    added, which matters when a caller configures logging more than once in a
    single process (tests, or a wrapper that converts several reports).
    """

    def __init__(self):
        self._initialized = False
        self._verbose = False
        self._sink_ids = []

    def is_initialized(self) -> bool:
        """Check if logger has been initialized."""
        return self._initialized

    def is_verbose(self) -> bool:
        """Check if verbose (DEBUG) console output is active."""
        return self._verbose

    def mark_initialized(self, verbose: bool = False):
        """Mark logger as initialized."""
        self._initialized = True
        self._verbose = verbose

    def add_sink_id(self, sink_id: int):
        """Track sink IDs for cleanup."""
        self._sink_ids.append(sink_id)

    @property
    def sink_ids(self):
        return list(self._sink_ids)

    def reset(self):
        """Reset logger state."""
        self._initialized = False
        self._verbose = False
        self._sink_ids.clear()


_logger_state = LoggerState()


# --- Configuration Validation Functions ---

def validate_log_level(level: str) -> str:
    """
    Validate a log level name.

    Args:
        level: Log level string to validate

    Returns:
        Upper-cased log level string

    Raises:
        LoggingConfigError: If log level is invalid
    """
    valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
    level_upper = level.upper()

    if level_upper not in valid_levels:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(sorted(valid_levels))}"
        )

    return level_upper


# --- Core Logging Configuration Functions ---

def configure_console_logging(
    level: str = "WARNING",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Add a console sink.

    Args:
        level: Log level for console output
        format_template: Custom format template (uses default if None)
        colorize: Enable colored console output
        destination: Console destination (default: sys.stderr)

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)

        if format_template is None:
            format_template = (
                "<green>{time:HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{module}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
            )

        sink_id = logger.add(
            destination,
            level=validated_level,
            format=format_template,
            colorize=colorize
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure console logging: {e}") from e


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    format_template: Optional[str] = None,
    encoding: str = "utf-8",
    create_dirs: bool = True
) -> int:
    """
    Add a rotating file sink.

    Args:
        log_file_path: Path to log file
        level: Log level for file output
        rotation: Log rotation setting
        retention: Log retention setting
        format_template: Custom format template (uses default if None)
        encoding: File encoding
        create_dirs: Create parent directories if they don't exist

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    try:
        validated_level = validate_log_level(level)
        path = Path(log_file_path)

        if create_dirs:
            path.parent.mkdir(parents=True, exist_ok=True)

        if format_template is None:
            format_template = (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} - {message}"
            )

        sink_id = logger.add(
            str(path),
            rotation=rotation,
            retention=retention,
            level=validated_level,
            format=format_template,
            encoding=encoding
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except LoggingConfigError:
        raise
    except Exception as e:
        raise LoggingConfigError(f"Failed to configure file logging: {e}") from e


def reset_logging():
    """
    Remove every sink, including Loguru's default one, and clear the state.

    Raises:
        LoggingConfigError: If reset fails
    """
    try:
        logger.remove()
        _logger_state.reset()
    except Exception as e:
        raise LoggingConfigError(f"Failed to reset logging configuration: {e}") from e


def configure_logging(
    verbose: bool = False,
    log_file: Optional[Union[str, Path]] = None,
    console_destination: Optional[TextIO] = None,
) -> Dict[str, int]:
    """
    Install the console sink, plus a file sink when ``log_file`` is given.

    ``verbose`` lowers the console level to DEBUG so that every searched
    mix/src location is shown.

    Returns:
        Dictionary mapping sink types to sink IDs
    """
    reset_logging()

    sink_ids = {}
    sink_ids['console'] = configure_console_logging(
        level="DEBUG" if verbose else "WARNING",
        destination=console_destination if console_destination is not None else sys.stderr,
    )

    if log_file is not None:
        sink_ids['file'] = configure_file_logging(log_file_path=log_file)

    _logger_state.mark_initialized(verbose=verbose)
    logger.debug("--- hpcreport logger initialized ---")
    return sink_ids


def get_logger_state() -> LoggerState:
    """Get current logger state for inspection."""
    return _logger_state


def is_logging_initialized() -> bool:
    return _logger_state.is_initialized()


# --- Auto-Initialization ---

def _auto_initialize_logging():
    # Tests install their own bridge sink; leave Loguru's sinks alone there.
    if not _logger_state.is_initialized() and not _is_pytest_running():
        configure_logging()


def _is_pytest_running() -> bool:
    """Detect if code is running under pytest."""
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


_auto_initialize_logging()
