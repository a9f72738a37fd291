"""
Logging setup for the fireworks storefront.

All storefront loggers hang off the ``fireworks_storefront`` namespace and
every record is stamped with the request that produced it, so a failed
collaborator call can be matched to the page that triggered it.

Log Format:
    2026-10-18 10:15:30 [INFO    ] [POST /checkout] fireworks_storefront.services.checkout_service - Order FW-1001 created
    2026-10-18 10:15:31 [ERROR   ] [GET /products] fireworks_storefront.routes.products - Failed to load products
    2026-10-18 10:15:31 [INFO    ] [-] fireworks_storefront.app - Application initialized successfully

Usage:
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=False)
    logger = get_logger(__name__)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from flask import has_request_context, request


APP_LOGGER_NAME = "fireworks_storefront"

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] [%(request_line)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class RequestContextFilter(logging.Filter):
    """
    Stamp each record with ``request_line`` ("GET /cart").

    Records emitted outside a request (startup, CLI commands) get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_line = f"{request.method} {request.path}"
        else:
            record.request_line = "-"
        return True


def _attach(logger: logging.Logger, handler: logging.Handler, level: int,
            formatter: logging.Formatter, context_filter: logging.Filter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(context_filter)
    logger.addHandler(handler)


def _rotating(path: Path) -> RotatingFileHandler:
    return RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure the storefront logger tree.

    Calling it again replaces the previous handlers, so each app built by
    create_app() gets exactly one set.

    Args:
        app_name: Namespace logger to configure
        log_level: Minimum level for console and main log file
        log_dir: Where log files go (default: ./logs next to this file)
        enable_file_logging: Add <app_name>.log and <app_name>_error.log

    Returns:
        The namespace logger
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    context_filter = RequestContextFilter()

    _attach(logger, logging.StreamHandler(sys.stdout), log_level, formatter, context_filter)

    if enable_file_logging:
        log_dir = log_dir or Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        main_log = log_dir / f"{app_name}.log"
        _attach(logger, _rotating(main_log), log_level, formatter, context_filter)
        _attach(logger, _rotating(log_dir / f"{app_name}_error.log"), logging.ERROR, formatter, context_filter)

        logger.info(f"File logging enabled: {main_log}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the storefront namespace.

    ``get_logger("services.checkout_service")`` returns
    "fireworks_storefront.services.checkout_service".
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
