from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc).isoformat()


class GatewayError(Exception):
    """所有业务异常的基类，status_code + error 决定返回给前端的内容"""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(
        self,
        error: Optional[str] = None,
        *,
        message: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        self.error = error or self.error
        self.message = message
        self.code = code
        super().__init__(self.error if message is None else f"{self.error}: {message}")


class ValidationError(GatewayError):
    status_code = 400
    error = "Invalid request"


class AuthRequired(GatewayError):
    status_code = 401
    error = "Authentication required"


class AuthInvalid(GatewayError):
    status_code = 403
    error = "Invalid or expired token"


class UpstreamAuthFailure(GatewayError):
    status_code = 401
    error = "Invalid username or password"


class UpstreamDataError(GatewayError):
    status_code = 500
    error = "Invalid data received"


class UpstreamCallFailure(GatewayError):
    status_code = 500
    error = "Upstream call failed"


class InternalError(GatewayError):
    status_code = 500
    error = "Internal server error"


def _body(request: Request, error: str, **extra: Any) -> Dict[str, Any]:
    content: Dict[str, Any] = {"error": error}
    content.update({k: v for k, v in extra.items() if v is not None})
    content["path"] = str(request.url.path)
    content["requestId"] = getattr(request.state, "request_id", None)
    content["timestamp"] = _now()
    return content


async def gateway_exception_handler(request: Request, exc: GatewayError):
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(request, exc.error, message=exc.message, code=exc.code),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_body(request, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=_body(request, "Invalid request", errors=jsonable_encoder(exc.errors())),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_body(request, InternalError.error, message=str(exc) or None),
    )
