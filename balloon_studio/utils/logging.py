"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from balloon_studio.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    # Configure standard library logging
    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class InventoryLogger:
    """Audit logger for stock mutations."""

    def __init__(self, component: str = "inventory"):
        self.component = component
        self.logger = get_logger(component)

    def log_adjustment(
        self,
        color: str,
        size: str,
        delta: int,
        before: int,
        after: int,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log one stock line changing quantity."""
        self.logger.info(
            "stock_adjusted",
            component=self.component,
            color=color,
            size=size,
            delta=delta,
            before=before,
            after=after,
            reason=reason,
            **kwargs,
        )

    def log_created(
        self,
        color: str,
        size: str,
        quantity: int,
        threshold: int,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log a stock record coming into existence."""
        self.logger.info(
            "stock_record_created",
            component=self.component,
            color=color,
            size=size,
            quantity=quantity,
            threshold=threshold,
            reason=reason,
            **kwargs,
        )

    def log_rejected(
        self,
        reason: str,
        error: str,
        **kwargs: Any,
    ) -> None:
        """Log a batch of adjustments that was refused."""
        self.logger.warning(
            "stock_adjustment_rejected",
            component=self.component,
            reason=reason,
            error=error,
            **kwargs,
        )
