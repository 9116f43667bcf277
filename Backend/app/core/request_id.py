# Backend/app/core/request_id.py
from __future__ import annotations

import contextvars
import time
import uuid
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"

_request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)

# app.core.logging imports this module; the proxy resolves on first use
logger = structlog.get_logger(module="request_id")


def new_request_id() -> str:
    return uuid.uuid4().hex

def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)

def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()

def clear_request_id() -> None:
    _request_id_ctx.set(None)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id (client-supplied ``X-Request-Id`` or a new
    one), expose it to log processors for the duration of the request and echo
    it on the response.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        set_request_id(req_id)
        started = time.perf_counter()
        try:
            logger.info("request_started", method=request.method, path=request.url.path)
            response = await call_next(request)
            logger.info(
                "request_ended",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        except Exception as exc:
            logger.error("request_exception", error_type=type(exc).__name__)
            raise
        finally:
            clear_request_id()

        response.headers[REQUEST_ID_HEADER] = req_id
        return response
