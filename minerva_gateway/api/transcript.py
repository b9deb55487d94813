from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from minerva_gateway.api.deps import current_claims
from minerva_gateway.core.security import SessionClaims
from minerva_gateway.schemas.portal import CredentialsBody, TranscriptResponse
from minerva_gateway.services.portal_service import PortalService, get_portal_service

router = APIRouter(prefix="/api", tags=["transcript"])


@router.get("/transcript", response_model=TranscriptResponse)
async def get_transcript(
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
    username: Optional[str] = Query(None),
    password: Optional[str] = Query(None),
):
    return await service.transcript(claims, username=username, password=password)


@router.post("/transcript", response_model=TranscriptResponse)
async def post_transcript(
    payload: Optional[CredentialsBody] = None,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    payload = payload or CredentialsBody()
    return await service.transcript(claims, username=payload.username, password=payload.password)
