# minerva_gateway/schemas/portal.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class CredentialsBody(BaseModel):
    """字段都可选：缺字段由校验层给出 400 + 具体提示，而不是 pydantic 的通用报错"""

    model_config = ConfigDict(extra="ignore")

    username: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CredentialsBody):
    pass


class TermRequest(CredentialsBody):
    season: Any = None
    year: Any = None
    crn: Any = None


class LoginUser(BaseModel):
    username: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoginUser


class UserResponse(BaseModel):
    username: str
    name: str
    isDemo: bool = False


class TranscriptResponse(BaseModel):
    cumGPA: str
    totalCredits: float | int
    courses: List[Any]


class RegistrationResponse(BaseModel):
    success: bool
    result: Any
