import logging
import sys

# Custom logging levels
TRACE_LEVEL = 5
PROGRESS_LEVEL = 22
SKIPPED_LEVEL = 23
SUCCESS_LEVEL = 25
NOTICE_LEVEL = 35
FAILURE_LEVEL = 45

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(PROGRESS_LEVEL, "PROGRESS")
logging.addLevelName(SKIPPED_LEVEL, "SKIPPED")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")
logging.addLevelName(NOTICE_LEVEL, "NOTICE")
logging.addLevelName(FAILURE_LEVEL, "FAILURE")


class ColoredFormatter(logging.Formatter):
    """Formatter that prefixes a status glyph and colors lines by level."""

    COLORS = {
        "TRACE": "\033[90m",  # Gray
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[0m",  # Default
        "PROGRESS": "\033[36m",  # Cyan
        "SKIPPED": "\033[90m",  # Gray
        "SUCCESS": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "NOTICE": "\033[1;34m",  # Bold Blue
        "ERROR": "\033[31m",  # Red
        "FAILURE": "\033[1;31m",  # Bold Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    GLYPHS = {
        "SKIPPED": "⊘",
        "SUCCESS": "✓",
        "WARNING": "⚠",
        "NOTICE": "===",
        "ERROR": "✗",
        "FAILURE": "✗",
    }

    def __init__(self, fmt: str = None, datefmt: str = None, use_glyphs: bool = True):
        super().__init__(fmt, datefmt)
        self.use_glyphs = use_glyphs

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        glyph = self.GLYPHS.get(record.levelname) if self.use_glyphs else None
        if glyph:
            message = f"{glyph} {message}"

        if sys.stderr.isatty():
            level_color = self.COLORS.get(record.levelname, "")
            return f"{level_color}{message}{self.COLORS['RESET']}"

        return message


def setup_colored_logging(level: int = logging.INFO, verbose: bool = False) -> None:
    """
    Configure colored console logging on the root logger.

    Args:
        level: Logging level (default: logging.INFO)
        verbose: Include timestamps, level names and logger names in each line
    """
    if verbose:
        formatter = ColoredFormatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            use_glyphs=False,
        )
    else:
        formatter = ColoredFormatter(fmt="%(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


class EnhancedLogger:
    """Logger wrapper exposing the custom levels as methods."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def trace(self, msg, *args, **kwargs):
        """Very detailed debugging info (per archive entry)."""
        self._logger.log(TRACE_LEVEL, msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        self._logger.info(msg, *args, **kwargs)

    def progress(self, msg, *args, **kwargs):
        """A step of a multi-step operation has started."""
        self._logger.log(PROGRESS_LEVEL, msg, *args, **kwargs)

    def skipped(self, msg, *args, **kwargs):
        """A step was intentionally not run."""
        self._logger.log(SKIPPED_LEVEL, msg, *args, **kwargs)

    def success(self, msg, *args, **kwargs):
        self._logger.log(SUCCESS_LEVEL, msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self._logger.warning(msg, *args, **kwargs)

    def notice(self, msg, *args, **kwargs):
        """Section titles."""
        self._logger.log(NOTICE_LEVEL, msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self._logger.error(msg, *args, **kwargs)

    def failure(self, msg, *args, **kwargs):
        """An operation aborted."""
        self._logger.log(FAILURE_LEVEL, msg, *args, **kwargs)

    def critical(self, msg, *args, **kwargs):
        self._logger.critical(msg, *args, **kwargs)

    # Delegate other logger methods
    def __getattr__(self, name):
        return getattr(self._logger, name)


def get_colored_logger(name: str) -> EnhancedLogger:
    """
    Get an enhanced logger instance with the custom level methods.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Enhanced logger instance
    """
    return EnhancedLogger(logging.getLogger(name))
