"""Request correlation and CORS for the workflow API."""

import logging
import re
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from foodtech.core.config import settings

logger = logging.getLogger("foodtech")

REQUEST_ID_HEADER = "X-Request-Id"
# Browser clients send the Supabase-style headers along with the bearer token
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type", "x-request-id"]

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def incoming_request_id(request: Request) -> str:
    """Reuse a caller-supplied id when it is well formed, else mint one."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _REQUEST_ID_RE.match(supplied):
        return supplied
    return uuid.uuid4().hex


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Tag each call with a correlation id and log one access line for it."""

    async def dispatch(self, request: Request, call_next):
        request_id = incoming_request_id(request)
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.1f}"

        level = logging.ERROR if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s %s -> %s (%.1fms)",
            request_id, request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        # credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(AccessLogMiddleware)
