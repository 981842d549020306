"""
Global error handling middleware.

Uses pure ASGI middleware (not BaseHTTPMiddleware) to avoid breaking
async generator dependencies like get_db_session().
"""
import json

from fastapi import HTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from order_sync.core.logging import get_logger

logger = get_logger(__name__)

# The gateway only reads the status code of webhook responses
WEBHOOK_PATH_PREFIX = "/webhook/"


class ErrorHandlerMiddleware:
    """
    Pure ASGI error handler that turns unhandled exceptions into 500s.

    API routes get the usual `{"success": false, "error": ...}` body;
    webhook routes get a bare text body.
    Does NOT catch HTTPException; FastAPI handles those itself.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            if isinstance(e, HTTPException):
                raise

            path = scope.get("path", "unknown")
            if response_started:
                # Headers already sent, can't change the response
                logger.exception(
                    "Unhandled exception after response started",
                    error=str(e),
                    path=path,
                )
                raise

            logger.exception("Unhandled exception", error=str(e), path=path)

            if path.startswith(WEBHOOK_PATH_PREFIX):
                body = b"Server error"
                content_type = b"text/plain; charset=utf-8"
            else:
                body = json.dumps({
                    "success": False,
                    "error": "Internal server error",
                    "details": type(e).__name__,
                }).encode("utf-8")
                content_type = b"application/json"

            await send({
                "type": "http.response.start",
                "status": 500,
                "headers": [
                    (b"content-type", content_type),
                    (b"content-length", str(len(body)).encode()),
                ],
            })
            await send({
                "type": "http.response.body",
                "body": body,
            })
