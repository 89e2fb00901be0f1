"""
Request tracing middleware.

Assigns every HTTP request an id (``req-<16 hex>``), exposes it to handlers
as ``request.state.request_id`` and to clients as ``X-Request-ID``, and logs
the request outcome with its duration.

Uses pure ASGI instead of BaseHTTPMiddleware so exceptions and streaming
responses pass through untouched.
"""
import logging
import secrets
import time
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = b"x-request-id"


def new_request_id() -> str:
    return f"req-{secrets.token_hex(8)}"


class RequestDebuggerMiddleware:

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = new_request_id()
        scope.setdefault("state", {})["request_id"] = request_id

        method = scope.get("method", "")
        path = scope.get("path", "")
        client = scope.get("client") or ("unknown", 0)
        logger.debug(f"Received request #{request_id}: {method} {path} from {client[0]}")

        start = time.perf_counter()
        status_code = None

        async def send_with_request_id(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception as e:
            logger.error(f"Request #{request_id}: FAILED - {type(e).__name__}: {e}")
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        if status_code is not None and status_code >= 400:
            logger.error(f"Request #{request_id}: FAILED - CODE {status_code} ({method} {path})")
        else:
            logger.debug(f"Request #{request_id}: processed in {duration_ms:.1f} ms")
