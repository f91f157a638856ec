"""
Logging configuration for sonarrapi.

Structured logging via structlog with correlation IDs and operation context.
Console output goes through Rich; production output is JSON. Everything is
written to standard error so stdout stays free for command output.
"""

import asyncio
import contextvars
import logging
import logging.handlers
import sys
import time
import traceback
import uuid
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler

# Context variables for correlation and request tracking
correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
operation_context: contextvars.ContextVar[dict[str, Any] | None] = (
    contextvars.ContextVar("operation_context", default=None)
)
request_start_time: contextvars.ContextVar[float] = contextvars.ContextVar(
    "request_start_time", default=0.0
)


class CorrelationIDProcessor:
    """Processor to add correlation ID to log records."""

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id_value = correlation_id.get("")
        if correlation_id_value:
            event_dict["correlation_id"] = correlation_id_value
        return event_dict


class OperationContextProcessor:
    """Processor to add operation context to log records."""

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        context = operation_context.get()
        if context:
            for key, value in context.items():
                event_dict.setdefault(key, value)
        return event_dict


class AsyncContextProcessor:
    """Processor to add async task context to log records."""

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            task = asyncio.current_task()
            if task:
                event_dict["task_name"] = task.get_name()
        except RuntimeError:
            # No event loop running
            pass
        return event_dict


class EnhancedStructuredLogger:
    """Wrapper for structured logging with exception details and context helpers."""

    def __init__(self, logger_name: str):
        self.logger = structlog.get_logger(logger_name)

    def with_correlation_id(
        self, correlation_id_value: str | None = None
    ) -> "EnhancedStructuredLogger":
        """Set the correlation ID for the current context."""
        if correlation_id_value is None:
            correlation_id_value = generate_correlation_id()

        correlation_id.set(correlation_id_value)
        return self

    def info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, **kwargs)

    def error(
        self, message: str, error: Exception | None = None, **kwargs: Any
    ) -> None:
        """Log an error message with structured data and exception details."""
        if error:
            kwargs.update(
                {
                    "error": str(error),
                    "error_type": type(error).__name__,
                }
            )
            category = getattr(error, "category", None)
            if category is not None:
                kwargs["error_category"] = category.value
            if error.__traceback__:
                kwargs["traceback"] = traceback.format_exception(
                    type(error), error, error.__traceback__
                )
        self.logger.error(message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.logger.debug(message, **kwargs)

    def audit(self, action: str, **kwargs: Any) -> None:
        """Log audit events."""
        kwargs.update({"audit": True, "action": action})
        self.logger.info(f"AUDIT: {action}", **kwargs)


def resolve_level(
    verbose: bool = False, quiet: bool = False, level: str | None = None
) -> int:
    """Turn CLI flags or a level name into a logging level."""
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    if level:
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    json_logs: bool = False,
    level: str | None = None,
    log_file: str | None = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
) -> None:
    """Configure structured logging for the application."""
    log_level = resolve_level(verbose, quiet, level)

    base_processors = [
        CorrelationIDProcessor(),
        OperationContextProcessor(),
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        AsyncContextProcessor(),
    ]

    if json_logs:
        processors = [
            *base_processors,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *base_processors,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S.%f"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            show_time=False,  # structlog adds the timestamp
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
        )
    ]

    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level, format="%(message)s", handlers=handlers, force=True
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    configure_third_party_loggers(verbose)


def configure_third_party_loggers(verbose: bool) -> None:
    """Configure third-party library loggers."""
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> EnhancedStructuredLogger:
    """Get a structured logger instance."""
    return EnhancedStructuredLogger(name)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID."""
    return correlation_id.get("")


def clear_context() -> None:
    """Clear all logging context variables."""
    correlation_id.set("")
    operation_context.set(None)
    request_start_time.set(0.0)


class LoggingContextManager:
    """Context manager that scopes a correlation ID and operation name."""

    def __init__(
        self,
        logger: EnhancedStructuredLogger,
        operation: str,
        correlation_id_value: str | None = None,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.correlation_id_value = correlation_id_value or generate_correlation_id()
        self.context = context
        self._tokens: list[tuple[contextvars.ContextVar, contextvars.Token]] = []

    def __enter__(self) -> EnhancedStructuredLogger:
        self._tokens = [
            (correlation_id, correlation_id.set(self.correlation_id_value)),
            (
                operation_context,
                operation_context.set({"operation": self.operation, **self.context}),
            ),
            (request_start_time, request_start_time.set(time.time())),
        ]
        self.logger.debug(f"Starting operation: {self.operation}")
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration_ms = round((time.time() - request_start_time.get()) * 1000, 2)

        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation}",
                error=exc_val,
                duration_ms=duration_ms,
            )
        else:
            self.logger.debug(
                f"Operation completed: {self.operation}", duration_ms=duration_ms
            )

        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


def operation_logger(
    operation_name: str, correlation_id_value: str | None = None, **context: Any
) -> LoggingContextManager:
    """Create a logging context manager for operations."""
    return LoggingContextManager(
        get_logger(__name__), operation_name, correlation_id_value, **context
    )
