"""
Settings — environment-driven configuration.

Variable names match the deployment environment of the storefront
(`RAZORPAY_KEY_ID`, `JWT_SECRET`, `ADMIN_TOKEN`, ...).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///./atelier.db"

    # Payment gateway
    payment_gateway: Literal["razorpay", "memory"] = "razorpay"
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_base_url: str = "https://api.razorpay.com/v1"
    gateway_timeout: float = 10.0
    currency: str = "INR"
    min_payable: int = 100

    # Auth
    jwt_secret: str = "change-me-please"
    jwt_ttl_days: int = 30
    admin_token: str = ""

    # HTTP
    cors_origin: str = "*"
    host: str = "0.0.0.0"
    port: int = 4000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def cors_origins(self) -> list[str]:
        if self.cors_origin.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ("Settings", "get_settings")
