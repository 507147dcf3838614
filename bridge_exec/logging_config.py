"""
Logging for route execution.

Step and provider modules log through stdlib loggers. setup_logging() renders
those records with structlog, and every record emitted while a step is polling
carries the route fields bound by route_step_context().
"""

import logging
import sys
from typing import Any, ContextManager, Optional

import structlog
from structlog.types import EventDict, WrappedLogger

from .config import settings

ROUTE_STEP_KEYS = ("active_route_id", "user_tx_index", "chain_id", "tx_hash")
QUIET_LOGGERS = ("httpcore", "httpx")


def route_step_context(**fields: Any) -> ContextManager[Any]:
    """Bind route step identifiers to every log record emitted inside the block."""
    unknown = set(fields) - set(ROUTE_STEP_KEYS)
    if unknown:
        raise ValueError(f"Unknown route step log fields: {sorted(unknown)}")
    return structlog.contextvars.bound_contextvars(**fields)


def add_step_label(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add a compact ``step`` label (route/index) when route fields are bound."""
    route_id = event_dict.get("active_route_id")
    index = event_dict.get("user_tx_index")
    if route_id is not None and index is not None:
        event_dict.setdefault("step", f"{route_id}/{index}")
    return event_dict


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Render stdlib log records through structlog.

    Args:
        log_level: Override log level (default: from settings.log_level)
        json_logs: Force JSON lines on or off (default: JSON unless DEBUG)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = level != logging.DEBUG

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_step_label,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
