from __future__ import annotations
import logging
from typing import Optional
from .contracts import ClockPort, SessionRecord, UserRecord, UserStorePort
from .crypto import SystemClock, new_refresh_token, tokens_equal
from .errors import UserNotFound

log = logging.getLogger("authservice.sessions")


class SessionManager:
    """
    Long-lived refresh sessions embedded in the user document.

    Each mutation is one atomic `store.update` call. Validation is read-only:
    expired sessions stay in the document until `prune_expired` or `revoke`
    removes them.
    """

    def __init__(
        self,
        store: UserStorePort,
        *,
        refresh_ttl_seconds: int,
        token_bytes: int = 64,
        clock: Optional[ClockPort] = None,
    ):
        self.store = store
        self.refresh_ttl_seconds = refresh_ttl_seconds
        self.token_bytes = token_bytes
        self.clock = clock or SystemClock()

    def create_session(self, user_id: str) -> str:
        token = new_refresh_token(self.token_bytes)
        session = SessionRecord(token=token, expires_at=self.clock.now_utc_ts() + self.refresh_ttl_seconds)

        def append(user: UserRecord) -> UserRecord:
            user.sessions.append(session)
            return user

        if self.store.update(user_id, append) is None:
            raise UserNotFound()
        log.info("session_created user_id=%s expires_at=%d", user_id, session.expires_at)
        return token

    def is_expired(self, session: SessionRecord) -> bool:
        return session.expires_at <= self.clock.now_utc_ts()

    def find_valid_session(self, user: UserRecord, refresh_token: str) -> Optional[SessionRecord]:
        if not refresh_token:
            return None
        for session in user.sessions:
            if tokens_equal(session.token, refresh_token) and not self.is_expired(session):
                return session
        return None

    def validate(self, user: UserRecord, refresh_token: str) -> bool:
        return self.find_valid_session(user, refresh_token) is not None

    def prune_expired(self, user_id: str) -> int:
        removed = 0

        def prune(user: UserRecord) -> UserRecord:
            nonlocal removed
            kept = [s for s in user.sessions if not self.is_expired(s)]
            removed = len(user.sessions) - len(kept)
            user.sessions = kept
            return user

        if self.store.update(user_id, prune) is None:
            raise UserNotFound()
        if removed:
            log.info("sessions_pruned user_id=%s removed=%d", user_id, removed)
        return removed

    def revoke(self, user_id: str, refresh_token: str) -> bool:
        removed = 0

        def drop(user: UserRecord) -> UserRecord:
            nonlocal removed
            kept = [s for s in user.sessions if not tokens_equal(s.token, refresh_token)]
            removed = len(user.sessions) - len(kept)
            user.sessions = kept
            return user

        if self.store.update(user_id, drop) is None:
            raise UserNotFound()
        log.info("session_revoked user_id=%s removed=%d", user_id, removed)
        return removed > 0
