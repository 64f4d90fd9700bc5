"""
Structured Logging

structlog setup shared by the API server and the daily task. Two pieces of
context ride along on every event when present:

    correlation_id  - set per HTTP request by CorrelationMiddleware
    run_id, date    - bound for the duration of one prediction assembly pass

Both live in context variables, so they follow the pass into the worker
threads started with asyncio.to_thread.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date
from typing import Any, Iterator, Optional

import structlog


correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Chatty at DEBUG: peewee logs every query, urllib3 every connection.
QUIET_LOGGERS = ("peewee", "urllib3")


def set_correlation_id(cid: str) -> None:
    correlation_id_var.set(cid)


def add_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    cid = correlation_id_var.get()
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


def service_name_processor(service_name: str) -> structlog.typing.Processor:
    def processor(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = service_name
        return event_dict

    return processor


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    service_name: str = "nohitter-data-platform",
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_format: JSON lines when True, colored console output otherwise
        service_name: Value of the "service" key on every event
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        service_name_processor(service_name),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def prediction_run(for_date: date) -> Iterator[str]:
    """
    Tag every event logged inside the block with a fresh run_id and the date.

    Yields:
        The run_id
    """
    run_id = str(uuid.uuid4())
    with structlog.contextvars.bound_contextvars(run_id=run_id, date=for_date.isoformat()):
        yield run_id


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger, optionally named by component.

    Example:
        log = get_logger("prediction_service")
        log.info("prediction_assembled", pitcher_id=592789, score=87.4)
    """
    return structlog.get_logger(name)
