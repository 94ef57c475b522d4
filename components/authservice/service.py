from __future__ import annotations
import logging
from typing import Optional
from fastapi import FastAPI, Request
from .contracts import (
    ClockPort, TokenSignerPort, UserStorePort,
    AuthResult, SessionContext, UserRecord,
)
from .config import AuthConfig
from .credentials import CredentialStore, PasswordHasher
from .crypto import HS256TokenSigner, SystemClock
from .errors import SessionInvalid, Unauthenticated, UserNotFound
from .sessions import SessionManager
from .store import build_user_store

log = logging.getLogger("authservice.service")


class AuthService:
    """
    Dual-token authentication: stateless HS256 access tokens plus
    server-side refresh sessions kept on the user document.
    """

    def __init__(
        self,
        *,
        store: UserStorePort,
        signer: TokenSignerPort,
        cfg: Optional[AuthConfig] = None,
        clock: Optional[ClockPort] = None,
    ):
        self.cfg = cfg or AuthConfig()
        self.clock = clock or SystemClock()
        self.store = store
        self.signer = signer
        self.credentials = CredentialStore(
            store,
            PasswordHasher(self.cfg.pbkdf2_iterations),
            min_password_length=self.cfg.min_password_length,
            clock=self.clock,
        )
        self.sessions = SessionManager(
            store,
            refresh_ttl_seconds=self.cfg.refresh_ttl_seconds,
            token_bytes=self.cfg.refresh_token_bytes,
            clock=self.clock,
        )

    @classmethod
    def from_config(cls, cfg: AuthConfig, *, clock: Optional[ClockPort] = None) -> "AuthService":
        clock = clock or SystemClock()
        signer = HS256TokenSigner(cfg.auth_secret.get_secret_value(), kid=cfg.auth_kid, clock=clock)
        return cls(store=build_user_store(cfg.user_store_path), signer=signer, cfg=cfg, clock=clock)

    # --------- Core operations ----------
    def signup(self, email: str, password: str) -> AuthResult:
        user = self.credentials.create(email, password)
        return self._issue_for_user(user)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.credentials.find_by_credentials(email, password)
        if self.cfg.prune_on_login:
            self.sessions.prune_expired(user.id)
        log.info("login_succeeded user_id=%s", user.id)
        return self._issue_for_user(user)

    def refresh_access_token(self, user_id: str, refresh_token: str) -> str:
        ctx = self.verify_session(user_id, refresh_token)
        return self.issue_access_token(ctx.user_id)

    def require_access_token(self, token: Optional[str]) -> str:
        try:
            return self.signer.verify(token or "")
        except Unauthenticated as ex:
            log.info("access_token_rejected code=%s", ex.code)
            raise

    def verify_session(self, user_id: Optional[str], refresh_token: Optional[str]) -> SessionContext:
        if not user_id or not refresh_token:
            log.info("session_rejected code=missing_headers")
            raise SessionInvalid()
        user = self.store.get_by_id(user_id)
        if user is None:
            log.info("session_rejected code=user_not_found user_id=%s", user_id)
            raise UserNotFound()
        if not self.sessions.validate(user, refresh_token):
            log.info("session_rejected code=session_invalid user_id=%s", user_id)
            raise SessionInvalid()
        return SessionContext(user_id=user.id, user=user, refresh_token=refresh_token)

    def logout(self, user_id: str, refresh_token: str) -> None:
        if not self.sessions.revoke(user_id, refresh_token):
            raise SessionInvalid()

    def issue_access_token(self, user_id: str) -> str:
        return self.signer.sign(user_id, self.cfg.access_ttl_seconds)

    # --------- Helpers ----------
    def _issue_for_user(self, user: UserRecord) -> AuthResult:
        refresh_token = self.sessions.create_session(user.id)
        access_token = self.issue_access_token(user.id)
        return AuthResult(user=user.public(), access_token=access_token, refresh_token=refresh_token)


def set_auth_service(app: FastAPI, svc: AuthService) -> None:
    app.state.auth_service = svc


def get_auth_service(request: Request) -> AuthService:
    # FastAPI dependency; the app factory installs the instance at startup.
    svc = getattr(request.app.state, "auth_service", None)
    if svc is None:
        raise RuntimeError("AuthService not configured; call set_auth_service() first")
    return svc
