"""Logging setup for the MCP server."""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    """Configure root logging to write to stderr.

    stdout is reserved for the stdio MCP transport, so every log record
    goes to stderr regardless of the transport in use.

    Args:
        log_level: Level name such as "DEBUG" or "INFO"
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )

    # httpx logs every request at INFO, which duplicates our own phase logging
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
