"""Logging setup shared by the library and the CLI.

Registers the TRACE level (below DEBUG) and a ``Logger.trace`` method.
The library only emits records; handlers are installed by the CLI.
"""

import logging

from binser.context import current_record

# Add TRACE log level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self: logging.Logger, message: str, *args, **kwargs) -> None:  # type: ignore
    """Log a message with severity 'TRACE'."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace  # type: ignore


# ANSI color codes for log levels
class Colors:
    """ANSI color codes"""

    RESET = "\033[0m"
    GREY = "\033[90m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"


LOG_LEVEL_COLORS = {
    logging.DEBUG: Colors.BLUE,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
    TRACE: Colors.GREY,
}


class RecordContextFormatter(logging.Formatter):
    """Formatter that prefixes the name of the record being processed."""

    def format(self, record: logging.LogRecord) -> str:
        level_color = LOG_LEVEL_COLORS.get(record.levelno, Colors.RESET)
        record.levelname_color = f"{level_color}{record.levelname:5}{Colors.RESET}"  # type: ignore

        name = current_record.get()
        if name:
            record.record_color = f"{Colors.CYAN}[{name}]{Colors.RESET} "  # type: ignore
        else:
            record.record_color = ""  # type: ignore

        if not hasattr(record, "asctime"):
            record.asctime = self.formatTime(record, self.datefmt)
        record.asctime_color = f"{Colors.GREY}{record.asctime}{Colors.RESET}"  # type: ignore

        return super().format(record)


def setup_logging(verbose: int) -> None:
    """Install the console handler on the root logger.

    Args:
        verbose: 0 for INFO, 1 for DEBUG, 2 or more for TRACE
    """
    log_levels = [logging.INFO, logging.DEBUG, TRACE]
    log_level = log_levels[min(verbose, 2)]

    formatter = RecordContextFormatter(
        "%(asctime_color)s %(record_color)s%(levelname_color)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
