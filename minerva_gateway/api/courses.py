from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from minerva_gateway.api.deps import current_claims
from minerva_gateway.core.security import SessionClaims
from minerva_gateway.schemas.portal import RegistrationResponse, TermRequest
from minerva_gateway.services.portal_service import PortalService, get_portal_service

router = APIRouter(prefix="/api", tags=["courses"])


@router.get("/courses")
async def search_courses(
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
    dep: Optional[str] = Query(None, description="院系代码，例如 COMP"),
    number: Optional[str] = Query(None, description="课程号，例如 202"),
    season: Optional[str] = Query(None, description="f / w / s"),
    year: Optional[str] = Query(None, description="四位年份"),
    username: Optional[str] = Query(None),
    password: Optional[str] = Query(None),
):
    return await service.search_courses(
        claims, dep=dep, number=number, season=season, year=year, username=username, password=password
    )


@router.post("/courses/add", response_model=RegistrationResponse)
async def add_courses(
    payload: TermRequest,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return await service.add_courses(
        claims,
        season=payload.season,
        year=payload.year,
        crn=payload.crn,
        username=payload.username,
        password=payload.password,
    )


@router.post("/courses/drop", response_model=RegistrationResponse)
async def drop_courses(
    payload: TermRequest,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return await service.drop_courses(
        claims,
        season=payload.season,
        year=payload.year,
        crn=payload.crn,
        username=payload.username,
        password=payload.password,
    )


@router.post("/courses/registered")
async def registered_courses(
    payload: TermRequest,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return await service.registered_courses(
        claims, season=payload.season, year=payload.year, username=payload.username, password=payload.password
    )


@router.post("/courses/view")
async def view_course(
    payload: TermRequest,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return await service.view_course(
        claims,
        season=payload.season,
        year=payload.year,
        crn=payload.crn,
        username=payload.username,
        password=payload.password,
    )


@router.post("/schedule")
async def schedule(
    payload: TermRequest,
    claims: SessionClaims = Depends(current_claims),
    service: PortalService = Depends(get_portal_service),
):
    return await service.schedule(
        claims,
        season=payload.season,
        year=payload.year,
        crn=payload.crn,
        username=payload.username,
        password=payload.password,
    )
