# minerva_gateway/main.py
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as SettingsError
from starlette.exceptions import HTTPException as StarletteHTTPException

from minerva_gateway.api.auth import router as auth_router
from minerva_gateway.api.courses import router as courses_router
from minerva_gateway.api.health import router as health_router
from minerva_gateway.api.transcript import router as transcript_router
from minerva_gateway.clients.portal_client import HttpPortalClient, PortalClientFactory, http_portal_factory
from minerva_gateway.core.config import Settings, get_settings
from minerva_gateway.core.errors import (
    GatewayError,
    gateway_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from minerva_gateway.middlewares.logging import LoggingMiddleware
from minerva_gateway.middlewares.request_id import RequestIdMiddleware
from minerva_gateway.services.demo import DemoDataset

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    portal_factory: Optional[PortalClientFactory] = None,
) -> FastAPI:
    if settings is None:
        # 模块级 app 也要读到 CORS_ORIGINS；配置缺失时留给 lifespan 报错
        try:
            settings = get_settings()
        except SettingsError:
            settings = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 配置缺失（管理账号 / JWT_SECRET）时这里直接抛出，进程起不来
        s = settings or get_settings()
        app.state.settings = s
        app.state.demo = DemoDataset()
        app.state.portal_factory = portal_factory or http_portal_factory(s)
        app.state.portal_admin = HttpPortalClient(s.portal_admin_user, s.portal_admin_pass, settings=s)
        logger.info("Minerva gateway started (env=%s, portal=%s)", s.env, s.portal_base_url)
        yield
        logger.info("Minerva gateway stopped")

    app = FastAPI(title="Minerva Gateway", lifespan=lifespan)

    # middleware
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=(settings.cors_origins if settings is not None else ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # exception handlers
    app.add_exception_handler(GatewayError, gateway_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(transcript_router)
    app.include_router(courses_router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to Minerva API Backend", "status": "online"}

    @app.get("/health")
    async def health():
        return {"status": "ok", "message": "FastAPI is running!"}

    return app


app = create_app()


def run() -> None:
    try:
        settings = get_settings()
    except SettingsError as e:
        configure_logging()
        logger.error("Missing or invalid configuration (PORTAL_ADMIN_USER / PORTAL_ADMIN_PASS / JWT_SECRET): %s", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
