# minerva_gateway/api/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from minerva_gateway.core.config import Settings
from minerva_gateway.core.security import SessionClaims, verify_token

# auto_error=False：没带 token 时交给 verify_token 抛 AuthRequired，统一走 JSON 错误格式
oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


async def current_claims(
    token: Optional[str] = Depends(oauth2),
    settings: Settings = Depends(get_settings_dep),
) -> SessionClaims:
    return verify_token(token, settings=settings)
