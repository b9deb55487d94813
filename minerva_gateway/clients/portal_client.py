# minerva_gateway/clients/portal_client.py
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

import httpx

from minerva_gateway.core.config import Settings


class PortalError(Exception):
    """教务系统调用失败；message / code 原样透传给前端做排查"""

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class PortalAuthError(PortalError):
    """教务系统拒绝了账号密码"""


class PortalClient(Protocol):
    async def get_transcript(self) -> Any: ...

    async def get_courses(self, query: Dict[str, Any]) -> Any: ...

    async def add_courses(self, request: Dict[str, Any]) -> Any: ...

    async def drop_courses(self, request: Dict[str, Any]) -> Any: ...

    async def get_registered_courses(self, query: Dict[str, Any]) -> Any: ...

    async def view_course(self, request: Dict[str, Any]) -> Any: ...


PortalClientFactory = Callable[[str, str], PortalClient]


class HttpPortalClient:
    """
    Minerva bridge 的 HTTP 访问层

    - 登录、cookie、HTML 解析都在 bridge 那边，这里只负责把调用转成 JSON 请求
    - 每个实例绑定一组账号密码（HTTP Basic 传给 bridge），账号错误在第一次调用时才暴露
    - transport：仅用于测试注入（MockTransport）
    """

    def __init__(
        self,
        username: str,
        password: str,
        *,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._auth = (username, password)
        self._base_url = settings.portal_base_url.rstrip("/")
        self._connect_timeout = settings.portal_connect_timeout
        self._read_timeout = settings.portal_read_timeout
        self._transport = transport

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self._connect_timeout,
            read=self._read_timeout,
            write=self._read_timeout,
            pool=self._connect_timeout,
        )

    def _client_kwargs(self) -> Dict[str, Any]:
        headers = {"Accept": "application/json"}
        kw: Dict[str, Any] = {
            "base_url": self._base_url,
            "timeout": self._timeout(),
            "auth": self._auth,
            "headers": headers,
        }
        if self._transport is not None:
            kw["transport"] = self._transport
        return kw

    async def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        async with httpx.AsyncClient(**self._client_kwargs()) as client:
            try:
                if method == "GET":
                    resp = await client.get(path, params=payload)
                else:
                    resp = await client.post(path, json=payload or {})
            except httpx.RequestError as exc:
                raise PortalError(f"无法连接教务系统: {exc}", code="PORTAL_UNREACHABLE") from exc

        if resp.status_code in (401, 403):
            raise PortalAuthError(self._error_message(resp), code="AUTH_FAILED", status_code=resp.status_code)
        if resp.status_code >= 400:
            raise PortalError(self._error_message(resp), code=self._error_code(resp), status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise PortalError("教务系统返回了非 JSON 内容", code="BAD_RESPONSE", status_code=resp.status_code) from exc

    @staticmethod
    def _error_body(resp: httpx.Response) -> Dict[str, Any]:
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _error_message(self, resp: httpx.Response) -> str:
        body = self._error_body(resp)
        return str(body.get("message") or body.get("error") or f"HTTP {resp.status_code}")

    def _error_code(self, resp: httpx.Response) -> str:
        return str(self._error_body(resp).get("code") or f"HTTP_{resp.status_code}")

    async def health(self) -> Dict[str, Any]:
        async with httpx.AsyncClient(**self._client_kwargs()) as client:
            try:
                resp = await client.get("/health")
            except httpx.RequestError as exc:
                return {"status_code": None, "ok": False, "error": str(exc)}
        return {"status_code": resp.status_code, "ok": resp.status_code < 400}

    async def get_transcript(self) -> Any:
        return await self._call("GET", "/transcript")

    async def get_courses(self, query: Dict[str, Any]) -> Any:
        return await self._call("GET", "/courses", query)

    async def add_courses(self, request: Dict[str, Any]) -> Any:
        return await self._call("POST", "/courses/add", request)

    async def drop_courses(self, request: Dict[str, Any]) -> Any:
        return await self._call("POST", "/courses/drop", request)

    async def get_registered_courses(self, query: Dict[str, Any]) -> Any:
        return await self._call("POST", "/courses/registered", query)

    async def view_course(self, request: Dict[str, Any]) -> Any:
        return await self._call("POST", "/courses/view", request)


def http_portal_factory(settings: Settings) -> PortalClientFactory:
    def _factory(username: str, password: str) -> PortalClient:
        return HttpPortalClient(username, password, settings=settings)

    return _factory
