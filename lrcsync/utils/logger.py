"""
Logging configuration and utilities for lrcsync
Provides colored console output and file logging with separation between user and technical messages
"""

import logging
import logging.handlers
import re
import sys
import time
from pathlib import Path
from typing import Optional
import colorama
from colorama import Fore, Back, Style
from tqdm import tqdm

from ..config.settings import get_settings


# Initialize colorama for Windows compatibility
colorama.init()


# Third-party loggers that would otherwise flood the console on every request
EXTERNAL_LIBS = [
    'urllib3', 'requests', 'mutagen',
    'urllib3.connectionpool', 'requests.packages.urllib3.connectionpool'
]

FILE_FORMAT = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(funcName)-20s | %(message)s'


class ConsoleMessageFilter(logging.Filter):
    """Filter to allow only user-facing messages to console"""

    def filter(self, record):
        # Allow all WARNING+ messages
        if record.levelno >= logging.WARNING:
            return True

        # Allow messages explicitly marked for console
        if getattr(record, 'console_output', False):
            return True

        # Allow messages from specific console loggers
        if record.name.endswith('.console') or record.name.endswith('.user'):
            return True

        return False


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colored output for console"""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Initialize colored formatter

        Args:
            fmt: Log format string
            use_colors: Whether to use colored output
        """
        super().__init__()
        self.use_colors = use_colors
        self.fmt = fmt or '%(message)s'

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors"""
        formatter = logging.Formatter(self.fmt)
        if self.use_colors and record.levelname in self.COLORS:
            # Copy so file handlers still see the plain level name
            record_copy = logging.makeLogRecord(record.__dict__)
            record_copy.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{Style.RESET_ALL}"
            message = formatter.format(record_copy)
            if record.levelno >= logging.WARNING:
                message = f"{self.COLORS[record.levelname]}{message}{Style.RESET_ALL}"
            return message
        return formatter.format(record)


class ProgressHandler(logging.Handler):
    """Custom handler that doesn't interfere with progress bars"""

    def __init__(self, stream=None):
        """Initialize progress-friendly handler"""
        super().__init__()
        self.stream = stream or sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        """Emit log record above any active tqdm bar"""
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3
) -> None:
    """
    Setup application logging configuration with separated console/file output

    Args:
        level: Logging level for the file handler (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (None to disable file logging)
        console_output: Enable console logging
        colored_output: Enable colored console output
        max_size: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # Console handler - only user-facing messages (WARNING+ or explicitly marked)
    if console_output:
        console_handler = ProgressHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if numeric_level <= logging.DEBUG else logging.INFO)
        console_handler.addFilter(ConsoleMessageFilter())
        console_handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=colored_output))
        root_logger.addHandler(console_handler)

    # File handler with full detail logging
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root_logger.addHandler(file_handler)

    for lib in EXTERNAL_LIBS:
        lib_logger = logging.getLogger(lib)
        lib_logger.setLevel(logging.CRITICAL)
        lib_logger.propagate = False

    logger = logging.getLogger('lrcsync')
    logger.debug(f"Logging initialized - Level: {level}, Console: {console_output}, File: {log_file}")


def get_current_log_file() -> Optional[Path]:
    """
    Get the current log file path from active file handlers

    Returns:
        Path to current log file or None if no file logging
    """
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def parse_size(size_str: str) -> int:
    """
    Parse size string to bytes

    Args:
        size_str: Size string like "10MB", "1GB", "500KB"

    Returns:
        Size in bytes

    Raises:
        ValueError: If the string is not a size
    """
    size_str = size_str.upper().strip()

    multipliers = {
        'B': 1,
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'TB': 1024 ** 4,
    }

    match = re.match(r'^(\d+(?:\.\d+)?)\s*([KMGT]?B)$', size_str)
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")

    number, unit = match.groups()
    return int(float(number) * multipliers[unit])


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for a module

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance with console_info/console_warning/console_error helpers
    """
    logger = logging.getLogger(name)

    def console_info(message: str):
        """Log message that should appear on console for user"""
        logger.info(message, extra={'console_output': True})

    def console_warning(message: str):
        """Log warning that should appear on console"""
        logger.warning(message)

    def console_error(message: str):
        """Log error that should appear on console"""
        logger.error(message)

    logger.console_info = console_info
    logger.console_warning = console_warning
    logger.console_error = console_error

    return logger


def configure_from_settings() -> None:
    """Configure logging from application settings"""
    settings = get_settings()

    log_file_path = None
    if settings.logging.file:
        log_path = Path(settings.logging.file).expanduser()
        if log_path.is_absolute():
            log_file_path = log_path
        else:
            log_file_path = settings.get_config_directory() / log_path

    setup_logging(
        level=settings.logging.level,
        log_file=str(log_file_path) if log_file_path else None,
        console_output=settings.logging.console_output,
        colored_output=settings.logging.colored_output,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count
    )


class OperationLogger:
    """Logger for tracking long-running operations with a live file counter"""

    def __init__(self, logger: logging.Logger, operation_name: str, show_progress: bool = True):
        """
        Initialize operation logger

        Args:
            logger: Base logger instance (from get_logger)
            operation_name: Name of the operation
            show_progress: Whether to draw a tqdm counter on the console
        """
        self.logger = logger
        self.operation_name = operation_name
        self.show_progress = show_progress
        self.start_time = None
        self.progress_bar = None

    def start(self, message: Optional[str] = None) -> None:
        """Start tracking operation - show to user"""
        self.start_time = time.time()
        self.logger.console_info(message or f"Starting {self.operation_name}")
        self.logger.info(f"Operation started: {self.operation_name}")

    def progress(self, message: str, current: Optional[int] = None, total: Optional[int] = None) -> None:
        """
        Log progress update

        The total may be unknown (a lazy directory walk), in which case tqdm
        shows a running count instead of a percentage.
        """
        if current is None:
            self.logger.info(f"{self.operation_name}: {message}")
            return

        self.logger.debug(f"{self.operation_name}: {message} ({current}/{total if total else '?'})")

        if not self.show_progress:
            return
        if self.progress_bar is None:
            self.progress_bar = tqdm(
                total=total,
                desc="Scanning",
                unit="file",
                ncols=100,
                colour='cyan',
                leave=False,
            )
        self.progress_bar.n = current
        self.progress_bar.refresh()

    def complete(self, message: Optional[str] = None) -> None:
        """Mark operation as complete - close progress bar"""
        self._close_bar()

        console_msg = message or f"{self.operation_name} completed"
        self.logger.console_info(console_msg)

        if self.start_time:
            duration = time.time() - self.start_time
            self.logger.info(f"Operation completed: {self.operation_name} in {duration:.2f}s")
        else:
            self.logger.info(f"Operation completed: {self.operation_name}")

    def _close_bar(self) -> None:
        if self.progress_bar:
            self.progress_bar.close()
            self.progress_bar = None

