# minerva_gateway/middlewares/logging.py
"""请求/响应日志中间件 - 记录请求参数和响应内容

注意：使用纯 ASGI 中间件而非 BaseHTTPMiddleware，避免 Python 3.11+ 中的
ExceptionGroup 兼容性问题。
password / token 一律打码后再写日志，Authorization 头不记录。
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any
from urllib.parse import parse_qsl

from starlette.types import ASGIApp, Receive, Scope, Send, Message

logger = logging.getLogger("api.access")

SENSITIVE_KEYS = frozenset({"password", "token"})
MAX_LOG_CHARS = 2000


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if k in SENSITIVE_KEYS else redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def _try_json(parts: list[bytes]) -> Any:
    if not parts:
        return None
    try:
        return json.loads(b"".join(parts).decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None


class LoggingMiddleware:
    """记录请求参数和响应内容的中间件"""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # 只处理 HTTP 请求
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "")
        path = scope.get("path", "")
        query_string = scope.get("query_string", b"").decode("utf-8")
        query_params = redact(dict(parse_qsl(query_string)))

        body_parts: list[bytes] = []

        async def receive_wrapper() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                body = message.get("body", b"")
                if body:
                    body_parts.append(body)
            return message

        req_log = f">>> {method} {path}"
        if query_params:
            req_log += f" | Query: {json.dumps(query_params, ensure_ascii=False)}"

        response_status = 0
        response_body_parts: list[bytes] = []

        async def send_wrapper(message: Message) -> None:
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message.get("status", 0)
            elif message["type"] == "http.response.body":
                body = message.get("body", b"")
                if body:
                    response_body_parts.append(body)
            await send(message)

        logger.info(req_log)

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        finally:
            duration = time.time() - start_time

            if method in ("POST", "PUT", "PATCH"):
                body = _try_json(body_parts)
                if body is not None:
                    logger.debug("    Body: %s", json.dumps(redact(body), ensure_ascii=False))

            resp_log = f"<<< {method} {path} | Status: {response_status} | Time: {duration:.3f}s"
            resp_content = _try_json(response_body_parts)
            if isinstance(resp_content, (dict, list)):
                resp_json = json.dumps(redact(resp_content), ensure_ascii=False)
                # 截断过长的响应
                if len(resp_json) > MAX_LOG_CHARS:
                    resp_json = resp_json[:MAX_LOG_CHARS] + "...[truncated]"
                resp_log += f" | {resp_json}"

            logger.info(resp_log)
