# minerva_gateway/core/config.py
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # 当前环境：dev / test / prod
    env: str = Field("dev", alias="ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], alias="CORS_ORIGINS")

    # ==== 教务系统（Minerva）管理账号，必须提供 ====
    portal_admin_user: str = Field(..., min_length=1, alias="PORTAL_ADMIN_USER")
    portal_admin_pass: str = Field(..., min_length=1, alias="PORTAL_ADMIN_PASS")

    # portal bridge 服务地址（真正的抓取/会话都在它那边）
    portal_base_url: str = Field("http://127.0.0.1:8700", alias="PORTAL_BASE_URL")
    portal_connect_timeout: float = Field(10.0, alias="PORTAL_CONNECT_TIMEOUT")
    portal_read_timeout: float = Field(30.0, alias="PORTAL_READ_TIMEOUT")

    # ==== JWT ====
    # 轮换 secret 会让所有已签发 token 失效
    jwt_secret: str = Field(..., min_length=1, alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    token_ttl_days: int = Field(7, ge=1, alias="TOKEN_TTL_DAYS")

    default_display_name: str = Field("McGill Student", alias="DEFAULT_DISPLAY_NAME")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
