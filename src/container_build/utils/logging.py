from __future__ import annotations

import logging
import sys
from typing import Any, cast

import structlog

SERVICE_NAME = "container-build"

# Lambda context attributes bound to every entry of one invocation
_LAMBDA_CONTEXT_FIELDS = ("aws_request_id", "function_name", "log_stream_name")


def add_service_name(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Processor that tags each entry with the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def bind_lambda_context(context: Any) -> None:
    """Bind the Lambda invocation's identifiers to all subsequent log entries.

    Context bound by a previous invocation in the same process is cleared
    first. A missing *context* (local runs, tests) only clears.
    """
    structlog.contextvars.clear_contextvars()
    if context is None:
        return
    fields = {name: getattr(context, name, None) for name in _LAMBDA_CONTEXT_FIELDS}
    structlog.contextvars.bind_contextvars(
        **{name: value for name, value in fields.items() if value}
    )


def configure_logging(level: str = "INFO", json: bool = True) -> None:
    """Configure structlog for container-build.

    In production (json=True), for example inside a Lambda function, entries
    are rendered as JSON. In development (json=False) the coloured console
    renderer is used.

    Args:
        level: Standard logging level string, e.g. "DEBUG", "INFO", "WARNING".
        json: If True, render log entries as JSON.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    # The Lambda runtime installs its own handler on the root logger.
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # botocore is chatty at DEBUG
    logging.getLogger("botocore").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a named structlog logger."""
    return cast(structlog.BoundLogger, structlog.get_logger(name))
