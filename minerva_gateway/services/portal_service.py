from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import Request

from minerva_gateway.clients.portal_client import PortalAuthError, PortalClient, PortalClientFactory, PortalError
from minerva_gateway.core.config import Settings
from minerva_gateway.core.errors import (
    UpstreamAuthFailure,
    UpstreamCallFailure,
    UpstreamDataError,
    ValidationError,
)
from minerva_gateway.core.security import SessionClaims, issue_token
from minerva_gateway.services.demo import DEMO_DISPLAY_NAME, DemoDataset, is_demo
from minerva_gateway.services.gpa import aggregate_gpa
from minerva_gateway.utils.validators import (
    normalize_department,
    validate_course_number,
    validate_crn,
    validate_season,
    validate_year,
)

logger = logging.getLogger(__name__)


class PortalService:
    """
    每个请求：校验 -> demo 数据 或 教务系统调用 -> (GPA 汇总) -> JSON

    教务客户端按请求用 token 里的账号密码现建，不做任何缓存。
    请求里带的 username/password 只用来判断是否 demo，不会顶替 token 的身份。
    """

    def __init__(self, *, settings: Settings, demo: DemoDataset, client_factory: PortalClientFactory) -> None:
        self.settings = settings
        self.demo = demo
        self.client_factory = client_factory

    def _use_demo(self, claims: SessionClaims, username: Optional[str], password: Optional[str]) -> bool:
        return claims.is_demo or is_demo(username, password)

    async def _call(
        self,
        action: str,
        claims: SessionClaims,
        fn: Callable[[PortalClient], Awaitable[Any]],
    ) -> Any:
        try:
            client = self.client_factory(claims.identity, claims.secret)
            return await fn(client)
        except PortalAuthError as e:
            logger.warning("教务系统拒绝凭证 (%s): %s", action, e.message)
            raise UpstreamAuthFailure(message=e.message, code=e.code) from e
        except PortalError as e:
            logger.exception("教务系统调用失败 (%s): %s", action, e.message)
            raise UpstreamCallFailure(f"Failed to {action}", message=e.message, code=e.code or "UNKNOWN_ERROR") from e
        except Exception as e:
            logger.exception("教务系统调用异常 (%s)", action)
            raise UpstreamCallFailure(
                f"Failed to {action}",
                message=str(e) or "Unknown error",
                code=getattr(e, "code", None) or "UNKNOWN_ERROR",
            ) from e

    # ---------------- auth ----------------

    async def login(self, *, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        username = (username or "").strip()
        password = password or ""
        if not username or not password:
            raise ValidationError("Username and password are required")

        demo = is_demo(username, password)
        if not demo:
            # 第一次调用才会真正校验账号密码
            try:
                client = self.client_factory(username, password)
                await client.get_transcript()
            except Exception as e:
                logger.warning("登录失败 user=%s: %s", username, e)
                raise UpstreamAuthFailure() from e

        token = issue_token(username, password, demo, settings=self.settings)
        return {
            "message": "Authentication successful",
            "token": token,
            "user": {"username": username},
        }

    def user(self, claims: SessionClaims) -> Dict[str, Any]:
        return {
            "username": claims.identity,
            "name": DEMO_DISPLAY_NAME if claims.is_demo else self.settings.default_display_name,
            "isDemo": claims.is_demo,
        }

    # ---------------- transcript ----------------

    async def transcript(
        self,
        claims: SessionClaims,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Dict[str, Any]:
        if self._use_demo(claims, username, password):
            courses = self.demo.get_transcript()
        else:
            courses = await self._call("fetch transcript", claims, lambda c: c.get_transcript())
            if not isinstance(courses, list):
                raise UpstreamDataError("Invalid transcript data received")

        return {**aggregate_gpa(courses), "courses": courses}

    # ---------------- courses ----------------

    async def search_courses(
        self,
        claims: SessionClaims,
        *,
        dep: Any,
        season: Any,
        year: Any,
        number: Any = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        dep = normalize_department(dep)
        season = validate_season(season)
        year = validate_year(year)
        number = validate_course_number(number)

        if self._use_demo(claims, username, password):
            return self.demo.get_courses(dep=dep, number=number)

        query: Dict[str, Any] = {"dep": dep, "season": season, "year": year}
        if number:
            query["number"] = number
        courses = await self._call("search for courses", claims, lambda c: c.get_courses(query))
        if not isinstance(courses, list):
            raise UpstreamDataError("Invalid course data received")
        return courses

    async def _change_registration(
        self,
        verb: str,
        claims: SessionClaims,
        *,
        season: Any,
        year: Any,
        crn: Any,
        username: Optional[str],
        password: Optional[str],
    ) -> Dict[str, Any]:
        season = validate_season(season)
        year = validate_year(year)
        crns = validate_crn(crn)

        if self._use_demo(claims, username, password):
            if verb == "add":
                result = self.demo.add_courses(season=season, year=year, crn=crns)
            else:
                result = self.demo.drop_courses(season=season, year=year, crn=crns)
            return {"success": True, "result": result}

        request = {"season": season, "year": year, "crn": crns}
        if verb == "add":
            result = await self._call("add courses", claims, lambda c: c.add_courses(request))
        else:
            result = await self._call("drop courses", claims, lambda c: c.drop_courses(request))
        if not result:
            raise UpstreamDataError(f"Failed to {verb} course - no result returned")
        return {"success": True, "result": result}

    async def add_courses(self, claims: SessionClaims, **kw: Any) -> Dict[str, Any]:
        return await self._change_registration("add", claims, **kw)

    async def drop_courses(self, claims: SessionClaims, **kw: Any) -> Dict[str, Any]:
        return await self._change_registration("drop", claims, **kw)

    async def registered_courses(
        self,
        claims: SessionClaims,
        *,
        season: Any,
        year: Any,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        season = validate_season(season)
        year = validate_year(year)

        if self._use_demo(claims, username, password):
            return self.demo.get_registered_courses()

        query = {"season": season, "year": year}
        courses = await self._call("fetch registered courses", claims, lambda c: c.get_registered_courses(query))
        if not isinstance(courses, list):
            raise UpstreamDataError("Invalid registered course data received")
        return courses

    async def view_course(
        self,
        claims: SessionClaims,
        *,
        season: Any,
        year: Any,
        crn: Any,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Dict[str, Any]:
        season = validate_season(season)
        year = validate_year(year)
        crns = validate_crn(crn)

        if self._use_demo(claims, username, password):
            return self.demo.view_course(crn=crns)

        request = {"season": season, "year": year, "crn": crns}
        detail = await self._call("view course", claims, lambda c: c.view_course(request))
        if not detail:
            raise UpstreamDataError("Failed to view course - no result returned")
        return detail

    async def schedule(
        self,
        claims: SessionClaims,
        *,
        season: Any,
        year: Any,
        crn: Any = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        # crn 可选：给了就只保留这些课
        crns = None if crn is None or crn == "" or crn == [] else validate_crn(crn)
        courses = await self.registered_courses(
            claims, season=season, year=year, username=username, password=password
        )
        if crns is None:
            return courses
        wanted = set(crns)
        return [c for c in courses if isinstance(c, dict) and str(c.get("crn")) in wanted]


def get_portal_service(request: Request) -> PortalService:
    state = request.app.state
    return PortalService(settings=state.settings, demo=state.demo, client_factory=state.portal_factory)
