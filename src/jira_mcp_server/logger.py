import json
import logging
import os
import sys

DEFAULT_LOG_FILE = "/tmp/jira-mcp-server.log"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_TEXT_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s %(message)s"


class JsonFormatter(logging.Formatter):
    """Single-line JSON formatter: one object per record (ts, level, logger, msg, exc)."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(datefmt=_DATEFMT)
    return logging.Formatter(_TEXT_FORMAT, datefmt=_DATEFMT)


def setup_logging(
    mode: str = "cli",
    debug: bool = False,
    log_file: str | None = None,
    log_format: str = "text",
    log_level: str | None = None,
) -> None:
    """
    Configure logging for the given execution mode.

    Args:
        mode: "mcp" logs to a file only (stdout carries JSON-RPC),
              "cli" logs to stderr and optionally to log_file.
        debug: Force DEBUG level regardless of LOG_LEVEL.
        log_file: Log file path (overrides LOG_FILE env var).
        log_format: "text" (default) or "json".
        log_level: Level name from the config file, used when LOG_LEVEL
                   is unset.

    Environment variables:
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR.
                   Default: WARNING for MCP mode, INFO for CLI mode.
        LOG_FILE: Log file path for MCP mode.
                  Default: /tmp/jira-mcp-server.log
    """
    default_level = "WARNING" if mode == "mcp" else "INFO"
    if debug:
        level = logging.DEBUG
    else:
        level_name = (
            os.getenv("LOG_LEVEL") or log_level or default_level
        ).upper()
        level = getattr(logging, level_name, logging.INFO)

    handlers: list[logging.Handler] = []
    if mode == "mcp":
        path = log_file or os.getenv("LOG_FILE", DEFAULT_LOG_FILE)
        handlers.append(logging.FileHandler(path, mode="a"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))
        if log_file:
            handlers.append(logging.FileHandler(log_file, mode="a"))

    for handler in handlers:
        handler.setFormatter(_formatter(log_format))

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Silence third-party libs unless DEBUG
    if level != logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
