"""
Logging utility for the StayNest marketplace.

Stores, the API and the CLI log through structlog bound loggers; records
end up on stdlib handlers attached to the ``staynest`` logger.
"""
import logging
import sys
from typing import List, Optional
from colorama import Fore, Style, init
import structlog

init(autoreset=True)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
ROOT_LOGGER = "staynest"


class ColorizedFormatter(logging.Formatter):
    """Console formatter that colors the level name, and the message from WARNING up."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color:
            record.levelname = f"{color}{record.levelname}{Style.RESET_ALL}"
        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"
        return super().format(record)


def _processors(json_output: bool) -> List:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _attach_handlers(stdlib_logger: logging.Logger, log_file: Optional[str]) -> None:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColorizedFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    stdlib_logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        stdlib_logger.addHandler(file_handler)


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Handlers are attached once per logger name, so calling this again only
    changes the level.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; records are also rendered as JSON

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=_processors(json_output=bool(log_file)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.setLevel(getattr(logging, level.upper()))
    if not stdlib_logger.handlers:
        _attach_handlers(stdlib_logger, log_file)

    return structlog.get_logger(name)


def get_logger(name: str = ROOT_LOGGER) -> structlog.BoundLogger:
    """
    Get a component logger namespaced under ``staynest``.

    Args:
        name: Component name, e.g. ``property_store``

    Returns:
        Structured logger
    """
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return structlog.get_logger(name)
