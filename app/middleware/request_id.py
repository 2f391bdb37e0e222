"""请求 ID 中间件：为每个 HTTP 请求绑定 ``X-Request-ID``，供日志过滤器读取。

请求头已携带 ``X-Request-ID`` 时沿用，否则生成 UUID4；同一值会写回响应头。
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "x-request-id"


class RequestIdMiddleware:
    def __init__(self, app: ASGIApp, set_request_id: Callable[[Optional[str]], None]) -> None:
        self.app = app
        self.set_request_id = set_request_id

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers") or [])
        raw = incoming.get(REQUEST_ID_HEADER.encode("latin-1"))
        request_id = raw.decode("latin-1").strip() if raw else ""
        request_id = request_id or str(uuid.uuid4())
        self.set_request_id(request_id)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            self.set_request_id(None)
