"""Structured JSON logging with correlation IDs.

This module configures structlog for structured JSON logging with
correlation ID tracking for request tracing, and provides the
``log_execution`` decorator used to trace service and repository calls.
"""

import contextlib
import functools
import inspect
import logging
import sys
import time
import uuid
from typing import Any, Callable, TypeVar

import structlog
from structlog.types import EventDict, Processor

from rolehex.core.config import get_settings

F = TypeVar("F", bound=Callable[..., Any])

_MAX_ARG_LENGTH = 100


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Fall back to a fresh correlation ID outside a request."""
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = f"cid_{uuid.uuid4().hex[:12]}"
    return event_dict


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["logger"] = logger.name if hasattr(logger, "name") else "rolehex"
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Any | None = None) -> None:
    """Configure structlog: console output in development, JSON otherwise."""
    if settings is None:
        settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
        rename_message_field,
    ]

    level = getattr(logging, settings.log_level)

    if settings.is_development or settings.log_format == "console":
        structlog.configure(
            processors=shared_processors
            + [
                structlog.dev.ConsoleRenderer(
                    colors=True,
                    exception_formatter=structlog.dev.plain_traceback,
                ),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=False,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=level,
        )

    else:
        structlog.configure(
            processors=shared_processors
            + [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=level,
            handlers=[logging.StreamHandler(sys.stdout)],
        )

        for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
            logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or "rolehex")


class LoggingContext:
    """Context manager binding key-value pairs to every log entry in its scope.

    Values bound before entering are restored on exit.

    Example:
        with LoggingContext(command="create-role"):
            logger.info("Role created")  # Includes command="create-role"
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self.tokens: Any = None

    def __enter__(self) -> "LoggingContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        if self.tokens is not None:
            structlog.contextvars.reset_contextvars(**self.tokens)
            self.tokens = None


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Clear all context variables from the current logging context."""
    structlog.contextvars.clear_contextvars()


def _format_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> list[str]:
    formatted = [repr(arg) for arg in args]
    formatted.extend(f"{key}={value!r}" for key, value in kwargs.items())
    return [
        item if len(item) <= _MAX_ARG_LENGTH else item[: _MAX_ARG_LENGTH - 3] + "..."
        for item in formatted
    ]


def log_execution(
    layer: str,
    expected_errors: tuple[type[BaseException], ...] = (),
) -> Callable[[F], F]:
    """Decorate an async method so its execution is logged.

    Logs entry, completion with ``duration_ms`` and failures. Calls slower
    than ``slow_operation_threshold_ms`` are logged as warnings. Errors listed
    in ``expected_errors`` are logged at info level without a traceback;
    anything else is logged as an error with the traceback attached. The
    exception is always re-raised.

    Works for coroutine functions and async generator functions. For async
    generators, completion is logged once the generator is exhausted.

    Args:
        layer: Architectural layer label (e.g. "SERVICE", "REPOSITORY").
        expected_errors: Exception types that are part of the normal contract.

    Returns:
        Decorator preserving the wrapped function's signature.
    """

    def decorator(func: F) -> F:
        logger = get_logger(func.__module__)

        def _operation(args: tuple[Any, ...]) -> str:
            owner = type(args[0]).__name__ if args else func.__module__
            return f"{owner}.{func.__name__}"

        def _started(operation: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> float:
            logger.debug(
                "Executing",
                layer=layer,
                operation=operation,
                args=_format_args(args[1:], kwargs),
            )
            return time.perf_counter()

        def _completed(operation: str, started_at: float) -> None:
            duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
            logger.debug("Completed", layer=layer, operation=operation, duration_ms=duration_ms)
            if duration_ms > get_settings().slow_operation_threshold_ms:
                logger.warning(
                    "Slow operation detected",
                    layer=layer,
                    operation=operation,
                    duration_ms=duration_ms,
                )

        def _failed(operation: str, started_at: float, exc: BaseException) -> None:
            duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
            if isinstance(exc, expected_errors):
                logger.info(
                    "Operation rejected",
                    layer=layer,
                    operation=operation,
                    duration_ms=duration_ms,
                    error=str(exc),
                    exc_type=type(exc).__name__,
                )
            else:
                logger.error(
                    "Operation failed",
                    layer=layer,
                    operation=operation,
                    duration_ms=duration_ms,
                    error=str(exc),
                    exc_type=type(exc).__name__,
                    exc_info=exc,
                )

        if inspect.isasyncgenfunction(func):

            @functools.wraps(func)
            async def gen_wrapper(*args: Any, **kwargs: Any) -> Any:
                operation = _operation(args)
                started_at = _started(operation, args, kwargs)
                try:
                    async with contextlib.aclosing(func(*args, **kwargs)) as stream:
                        async for item in stream:
                            yield item
                except Exception as exc:
                    _failed(operation, started_at, exc)
                    raise
                _completed(operation, started_at)

            return gen_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            operation = _operation(args)
            started_at = _started(operation, args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                _failed(operation, started_at, exc)
                raise
            _completed(operation, started_at)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
