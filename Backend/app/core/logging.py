# Backend/app/core/logging.py
from __future__ import annotations

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone

import structlog

from app.core.request_id import get_request_id


# -------- Processors ---------------------------------------------------------

def _add_ts(_: Any, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    # ISO 8601 UTC, millisecond precision
    event_dict.setdefault("ts", datetime.now(timezone.utc).isoformat(timespec="milliseconds"))
    return event_dict

def _add_level(_: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    # structlog passes the bound method name ("info", "warning", ...)
    event_dict["level"] = str(event_dict.get("level") or method_name).lower()
    return event_dict

def _add_service(service_name: str):
    def _inner(_: Any, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict
    return _inner

def _add_request_id(_: Any, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    rid = get_request_id()
    if rid:
        event_dict.setdefault("request_id", rid)
    return event_dict


# -------- Public API ---------------------------------------------------------

_configured = False

def configure_logging(service_name: str = "api", *, level: int = logging.INFO) -> None:
    """
    Configure the process-wide structlog stack (API server and CLI scripts).

    Every event is written to stderr as a single JSON line carrying ``ts``,
    ``level``, ``service`` and, inside a request, ``request_id``. Calling it
    again replaces the previous configuration.
    """
    global _configured

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            _add_ts,
            _add_level,
            _add_service(service_name),
            _add_request_id,
            structlog.processors.EventRenamer("event"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    _configured = True

def get_logger(**bindings: Any) -> structlog.BoundLogger:
    """Logger with ``bindings`` attached to every event, e.g. ``get_logger(module="feed_dates")``."""
    if not _configured:
        configure_logging("api")
    return structlog.get_logger(**bindings)
