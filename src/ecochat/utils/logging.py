"""
Structured logging setup for EcoChat.

All log output goes to stderr so CLI commands can write JSON to stdout.
Console rendering is used by default; ``json_format`` switches to one JSON
object per line for log aggregation.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Safe to call more than once; the last call wins.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines instead of console output
        log_file: Also write standard library records to this file

    Example:
        setup_logging(level="DEBUG")
        setup_logging(level="INFO", json_format=True, log_file="ecochat.log")
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger for a module.

    Example:
        logger = get_logger(__name__)
        logger.info("Provider selected", provider="Mistral", score=0.61)
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Bind key/value pairs to every log line emitted inside the block.

    Nested contexts restore the outer values on exit.

    Example:
        with LogContext(request_id="req-123"):
            logger.info("Estimating")  # includes request_id
    """

    def __init__(self, **context: Any):
        self.context = context
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
        self._tokens = {}


# =============================================================================
# Service Logger
# =============================================================================


class ServiceLogger:
    """
    Logger bound to one outbound service ("openai", "climatiq", "api").

    Every event carries ``service=<name>``, so callers are free to pass
    their own ``provider=`` or ``model=`` fields.
    """

    def __init__(self, service: str):
        self.service = service
        # Lazy proxy, so a later setup_logging() still applies
        self.logger = structlog.get_logger(f"ecochat.{service}", service=service)

    def debug(self, event: str, **extra: Any) -> None:
        self.logger.debug(event, **extra)

    def info(self, event: str, **extra: Any) -> None:
        self.logger.info(event, **extra)

    def warning(self, event: str, **extra: Any) -> None:
        self.logger.warning(event, **extra)

    def error(self, event: str, **extra: Any) -> None:
        self.logger.error(event, **extra)

    def log_request(self, model: str, input_tokens: int, **extra: Any) -> None:
        """Outgoing completion request."""
        self.logger.debug("Completion request", model=model, input_tokens=input_tokens, **extra)

    def log_response(
        self,
        model: str,
        output_tokens: int,
        latency_ms: float,
        **extra: Any,
    ) -> None:
        """Completed completion request."""
        self.logger.debug(
            "Completion response",
            model=model,
            output_tokens=output_tokens,
            latency_ms=round(latency_ms, 2),
            **extra,
        )

    def log_error(self, error: Exception, **extra: Any) -> None:
        """Failed request, with the exception type and message."""
        self.logger.error(
            "Service error",
            error_type=type(error).__name__,
            error_message=str(error),
            **extra,
        )


# Console logging on stderr until an entry point reconfigures it
setup_logging()
