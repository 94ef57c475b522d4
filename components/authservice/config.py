from __future__ import annotations
from typing import Optional
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthConfig(BaseSettings):
    auth_secret: SecretStr = Field(default=SecretStr("change-me-dev-secret"))
    auth_kid: Optional[str] = "primary"
    access_ttl_seconds: int = 900              # 15 minutes
    refresh_ttl_seconds: int = 1209600         # 14 days
    refresh_token_bytes: int = 64
    min_password_length: int = 8
    pbkdf2_iterations: int = 100_000
    prune_on_login: bool = True
    # Empty means in-memory; otherwise a SQLite file path.
    user_store_path: str = ""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @model_validator(mode="after")
    def check_lifetimes(self) -> "AuthConfig":
        if not self.auth_secret.get_secret_value():
            raise ValueError("AUTH_SECRET must not be empty")
        if self.access_ttl_seconds <= 0:
            raise ValueError("ACCESS_TTL_SECONDS must be positive")
        if self.refresh_ttl_seconds < 100 * self.access_ttl_seconds:
            raise ValueError("REFRESH_TTL_SECONDS must be at least 100x ACCESS_TTL_SECONDS")
        if self.refresh_token_bytes < 16:
            raise ValueError("REFRESH_TOKEN_BYTES must be at least 16")
        return self
