from __future__ import annotations

from fastapi import APIRouter, Depends

from minerva_gateway.api.deps import current_claims
from minerva_gateway.core.security import SessionClaims
from minerva_gateway.schemas.portal import LoginRequest, LoginResponse, UserResponse
from minerva_gateway.services.portal_service import PortalService, get_portal_service

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    service: PortalService = Depends(get_portal_service),
):
    return await service.login(username=payload.username, password=payload.password)


@router.get("/user", response_model=UserResponse)
async def user(
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return service.user(claims)
