import json
import logging
import time
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "florentine_mcp"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def format_data(data: Any) -> str:
    """Render structured log data the way the debug log expects it.

    Pydantic models are dumped by alias so the log shows wire field names.
    Anything json can't handle falls back to ``str``.
    """
    if hasattr(data, "model_dump"):
        data = data.model_dump(by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, default=str)


class DebugFileFormatter(logging.Formatter):
    """``[2025-01-01T10:00:00.000Z] INFO: message`` lines for the debug log file."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__("[%(asctime)s] %(levelname)s: %(message)s")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        ct = self.converter(record.created)
        return "{}.{:03d}Z".format(
            time.strftime("%Y-%m-%dT%H:%M:%S", ct), int(record.msecs)
        )


def configure_logging(
    debug: bool = False,
    logpath: str | None = None,
    logger: logging.Logger | None = None,
) -> logging.Logger:
    """Configure the debug side channel.

    With ``debug`` and a ``logpath`` records are appended to that file. With
    ``debug`` alone they go to stderr through rich; stdout is reserved for the
    stdio transport. Without ``debug`` nothing is emitted.
    """
    if logger is None:
        logger = logging.getLogger(ROOT_LOGGER)

    # Remove any existing handlers to avoid duplicates on reconfiguration
    for hdlr in logger.handlers[:]:
        logger.removeHandler(hdlr)
        hdlr.close()

    logger.propagate = False

    if not debug:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    logger.setLevel(logging.DEBUG)
    open_error: OSError | None = None
    handler: logging.Handler | None = None
    if logpath:
        try:
            handler = logging.FileHandler(logpath, mode="a", encoding="utf-8")
            handler.setFormatter(DebugFileFormatter())
        except OSError as e:
            open_error = e
    if handler is None:
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)

    # Set logging level on FastMCP and MCP libraries
    logging.getLogger("fastmcp").setLevel(logging.DEBUG)
    logging.getLogger("mcp").setLevel(logging.DEBUG)

    if open_error is not None:
        logger.warning(f"Could not open debug log {logpath}, logging to stderr: {open_error}")
    logger.info("Logging Configured")

    return logger
