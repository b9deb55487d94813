# minerva_gateway/tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager

from minerva_gateway.clients.portal_client import PortalAuthError
from minerva_gateway.core.config import Settings
from minerva_gateway.core.security import issue_token
from minerva_gateway.main import create_app


class FakePortal:
    """
    假的教务系统：
    - responses[method] 是返回值；是异常实例时直接抛
    - calls 记录每次调用 (username, method, arg)，用来断言有没有打到上游
    - valid 之外的账号一律 PortalAuthError
    """

    def __init__(self) -> None:
        self.valid: Dict[str, str] = {"260000001": "hunter2"}
        self.responses: Dict[str, Any] = {
            "get_transcript": [],
            "get_courses": [],
            "add_courses": {"added": True},
            "drop_courses": {"dropped": True},
            "get_registered_courses": [],
            "view_course": {"crn": "1234"},
        }
        self.calls: List[Tuple[str, str, Any]] = []

    def factory(self, username: str, password: str) -> "FakePortalClient":
        return FakePortalClient(self, username, password)


class FakePortalClient:
    def __init__(self, portal: FakePortal, username: str, password: str) -> None:
        self.portal = portal
        self.username = username
        self.password = password

    async def _answer(self, method: str, arg: Any = None) -> Any:
        self.portal.calls.append((self.username, method, arg))
        if self.portal.valid.get(self.username) != self.password:
            raise PortalAuthError("Invalid credentials", code="AUTH_FAILED")
        r = self.portal.responses[method]
        if isinstance(r, Exception):
            raise r
        return r

    async def get_transcript(self):
        return await self._answer("get_transcript")

    async def get_courses(self, query):
        return await self._answer("get_courses", query)

    async def add_courses(self, request):
        return await self._answer("add_courses", request)

    async def drop_courses(self, request):
        return await self._answer("drop_courses", request)

    async def get_registered_courses(self, query):
        return await self._answer("get_registered_courses", query)

    async def view_course(self, request):
        return await self._answer("view_course", request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        PORTAL_ADMIN_USER="admin",
        PORTAL_ADMIN_PASS="admin-pass",
        JWT_SECRET="test-secret",
        PORTAL_BASE_URL="http://portal.test",
    )


@pytest.fixture
def fake_portal() -> FakePortal:
    return FakePortal()


@pytest.fixture
def app(settings, fake_portal):
    return create_app(settings, portal_factory=fake_portal.factory)


@pytest_asyncio.fixture
async def client(app):
    """
    - 触发 FastAPI lifespan（startup/shutdown）
    - 用 ASGITransport 直接打进 app，不走网络
    """
    async with LifespanManager(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def user_headers(settings) -> Dict[str, str]:
    token = issue_token("260000001", "hunter2", False, settings=settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def demo_headers(settings) -> Dict[str, str]:
    token = issue_token("demo", "demo", True, settings=settings)
    return {"Authorization": f"Bearer {token}"}
