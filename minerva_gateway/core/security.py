"""
Session token issue / verify.

The token is self-contained: it carries the portal username AND password so
that every protected endpoint can rebuild a portal client without any
server-side session store. This is a known weakness: whoever holds the
token holds the credentials, and a token cannot be revoked before it
expires. Replacing the embedded password with a revocable session id
mapped server-side is the way out if a store is ever added.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from .config import Settings
from .errors import AuthInvalid, AuthRequired


@dataclass(frozen=True)
class SessionClaims:
    identity: str
    secret: str
    is_demo: bool = False


def issue_token(
    identity: str,
    secret: str,
    is_demo: bool,
    *,
    settings: Settings,
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(days=settings.token_ttl_days)
    payload: Dict[str, Any] = {
        "sub": identity,
        "username": identity,
        "password": secret,
        "isDemo": bool(is_demo),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: Optional[str], *, settings: Settings) -> SessionClaims:
    """
    - 没带 token -> AuthRequired (401)
    - 带了但签名错 / 过期 / 字段缺失 -> AuthInvalid (403)
    """
    if not token or not token.strip():
        raise AuthRequired()

    try:
        payload = jwt.decode(token.strip(), settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise AuthInvalid(message="Token expired") from exc
    except JWTError as exc:
        raise AuthInvalid(message=str(exc) or None) from exc

    identity = payload.get("username") or payload.get("sub")
    secret = payload.get("password")
    if not isinstance(identity, str) or not identity or not isinstance(secret, str) or not secret:
        raise AuthInvalid(message="Token is missing credentials")

    return SessionClaims(identity=identity, secret=secret, is_demo=payload.get("isDemo") is True)
