"""Colored logging configuration for the Signal Desk CLI."""

import logging
import sys
from pathlib import Path

# ANSI color codes
COLORS = {
    # Log levels
    "DEBUG": "\033[36m",      # Cyan
    "INFO": "\033[32m",       # Green
    "WARNING": "\033[33m",    # Yellow
    "ERROR": "\033[31m",      # Red
    "CRITICAL": "\033[35m",   # Magenta
    # Service prefixes
    "STORE": "\033[96m",      # Bright Cyan
    "WORKSPACE": "\033[95m",  # Bright Magenta
    "NEWSLETTER": "\033[94m", # Bright Blue
    "EXTRACTOR": "\033[97m",  # Bright White
    "LLM": "\033[93m",        # Bright Yellow
    "CLI": "\033[92m",        # Bright Green
    # Formatting
    "RESET": "\033[0m",
    "BOLD": "\033[1m",
    "DIM": "\033[2m",
}

# Service prefix patterns to colorize
SERVICE_PREFIXES = ["STORE", "WORKSPACE", "NEWSLETTER", "EXTRACTOR", "LLM", "CLI"]


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for levels and service prefixes."""

    def format(self, record: logging.LogRecord) -> str:
        # Save original values
        original_levelname = record.levelname
        original_msg = record.msg

        # Color the level name
        level_color = COLORS.get(record.levelname, "")
        reset = COLORS["RESET"]
        record.levelname = f"{level_color}{record.levelname:<7}{reset}"

        # Color service prefixes in the message
        if isinstance(record.msg, str):
            msg = record.msg
            for prefix in SERVICE_PREFIXES:
                bracket_prefix = f"[{prefix}]"
                if bracket_prefix in msg:
                    colored_prefix = f"{COLORS.get(prefix, '')}{COLORS['BOLD']}[{prefix}]{reset}"
                    msg = msg.replace(bracket_prefix, colored_prefix)
            record.msg = msg

        # Format the record
        result = super().format(record)

        # Restore original values (in case record is reused)
        record.levelname = original_levelname
        record.msg = original_msg

        return result


def setup_colored_logging(verbose: bool = False) -> None:
    """Configure colored logging for the CLI.

    Logs go to stderr so that command output on stdout (drafts, listings)
    stays clean for piping.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    # Create handler with colored formatter
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    root_logger.addHandler(handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def add_error_log(path: Path) -> logging.Handler:
    """Also append warnings and errors to a plain-text log file.

    Args:
        path: Log file, created along with its parent directory if missing.

    Returns:
        The attached handler, so callers can remove and close it.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Plain format: the file is read outside a terminal
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))

    logging.getLogger().addHandler(handler)
    return handler
