import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "mcp_bridge"

# Loggers of the client stack that follow the bridge's level
SESSION_LOGGERS = ("fastmcp", "mcp")

# Logs one INFO line per Streamable HTTP request
REQUEST_LOGGER = "httpx"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(
    level: str | int = "INFO",
    logger: logging.Logger | None = None,
) -> None:
    """
    Send bridge logs to stderr through rich and align the client stack's levels.

    ``httpx`` request lines are only shown when ``level`` is DEBUG.
    """
    if logger is None:
        logger = logging.getLogger(ROOT_LOGGER)

    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.setLevel(level)

    for existing in logger.handlers[:]:
        logger.removeHandler(existing)
    logger.addHandler(handler)

    for name in SESSION_LOGGERS:
        logging.getLogger(name).setLevel(level)

    effective = logger.getEffectiveLevel()
    if effective > logging.DEBUG:
        logging.getLogger(REQUEST_LOGGER).setLevel(max(effective, logging.WARNING))
    else:
        logging.getLogger(REQUEST_LOGGER).setLevel(effective)

    logger.debug(f"Logging configured at {logging.getLevelName(effective)}")
