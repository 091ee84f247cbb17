"""Middleware binding a request id and path into the logging context."""
from __future__ import annotations

import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from benefits.core.logger import log_context

REQUEST_ID_HEADER = b"x-request-id"


class RequestContextMiddleware:
    """ASGI middleware that tags every log record emitted during a request.

    The id is taken from an incoming ``X-Request-ID`` header when present and
    generated otherwise; it is echoed back on the response.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(REQUEST_ID_HEADER, b"").decode("latin-1") or uuid.uuid4().hex

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = [
                    (key, value)
                    for key, value in message.get("headers", [])
                    if key.lower() != REQUEST_ID_HEADER
                ]
                response_headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message = {**message, "headers": response_headers}
            await send(message)

        with log_context.scoped(request_id=request_id, path=scope.get("path")):
            await self.app(scope, receive, send_with_request_id)


__all__ = ["RequestContextMiddleware"]
