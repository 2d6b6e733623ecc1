"""Correlation ID middleware for tracing a webhook delivery through its logs."""

import time
import uuid
from typing import Callable

import logfire
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a correlation ID to every request.

    The ID is taken from the incoming header when present (useful when a
    proxy already assigned one), otherwise generated. It is stored on
    ``request.state.correlation_id``, bound to a Logfire span wrapping the
    request, and echoed back in the response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = CORRELATION_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        start_time = time.time()
        with logfire.span(
            "{method} {path}",
            method=request.method,
            path=request.url.path,
            correlation_id=correlation_id,
        ):
            response = await call_next(request)
            logfire.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                response_time_ms=(time.time() - start_time) * 1000,
                correlation_id=correlation_id,
            )

        response.headers[self.header_name] = correlation_id
        return response
