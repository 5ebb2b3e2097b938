"""Logging configuration for the Zep MCP server.

Uses loguru with automatic rotation. stdout carries the MCP stdio stream,
so console output always goes to stderr. Logs are also written to
~/.zep_mcp/logs/ with:
- Rotation at 10 MB per file
- Retention of 7 days
- Compression of old logs

Environment variables:
- ZEP_MCP_LOG_LEVEL: stderr log level (default: INFO)
- ZEP_MCP_LOG_DIR: log file directory (default: ~/.zep_mcp/logs)
"""

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from time import perf_counter

from loguru import logger

_global_log_level = os.getenv("ZEP_MCP_LOG_LEVEL", "INFO").upper()


def _log_filter(record) -> bool:
    """Filter stderr records by the configured global level."""
    try:
        return record["level"].no >= logger.level(_global_log_level).no
    except ValueError:
        return True  # Unknown level name, allow the message


# Remove default handler
logger.remove()

_log_dir = Path(os.getenv("ZEP_MCP_LOG_DIR", str(Path.home() / ".zep_mcp" / "logs")))
_log_dir.mkdir(parents=True, exist_ok=True)

# Console handler - stderr only
logger.add(
    sys.stderr,
    level=0,  # Accept all, let filter decide
    filter=_log_filter,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    colorize=True,
)

# File handler - DEBUG level, with rotation
logger.add(
    _log_dir / "zep_mcp_{time:YYYY-MM-DD}.log",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
    rotation="10 MB",
    retention="7 days",
    compression="zip",
    enqueue=True,
)


def get_logger(name: str):
    """Get a logger with the given name bound to context.

    Args:
        name: Module or component name

    Returns:
        Logger instance with name bound
    """
    return logger.bind(name=name)


@contextmanager
def log_timing(operation: str, log_instance=None, level: str = "debug"):
    """Context manager for timing operations with automatic logging.

    Args:
        operation: Description of the operation being timed
        log_instance: Logger instance (uses global logger if None)
        level: Log level for the timing message (default: debug)

    Yields:
        dict with 'elapsed_ms' key (populated after context exits)

    Example:
        with log_timing("GET /threads/abc/messages", log) as timing:
            response = await client.get(...)
    """
    log_fn = log_instance or logger
    timing = {"elapsed_ms": 0.0}
    start = perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = (perf_counter() - start) * 1000
        getattr(log_fn, level)(f"{operation}: {timing['elapsed_ms']:.1f}ms")


__all__ = ["logger", "get_logger", "log_timing"]
