from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/liveness")
async def liveness():
    # 进程活着就算 OK（给 k8s/ALB 用）
    return {"status": "ok"}


@router.get("/readiness")
async def readiness(request: Request):
    # 用管理账号探一下 portal bridge
    r = await request.app.state.portal_admin.health()
    if not r["ok"]:
        return JSONResponse(status_code=503, content={"status": "degraded", "portal": r})
    return {"status": "ok", "portal": r}
