from __future__ import annotations
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "tasklist-api"

# Mirrors the headers the auth gates read and the token headers clients must see.
CORS_ALLOW_METHODS = ["GET", "POST", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"]
CORS_ALLOW_HEADERS = [
    "Origin", "X-Requested-With", "Content-Type", "Accept",
    "x-access-token", "x-refresh-token", "_id",
]
CORS_EXPOSE_HEADERS = ["x-access-token", "x-refresh-token"]


class AppSettings(BaseSettings):
    app_name: str = APP_NAME
    app_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_allow_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")
