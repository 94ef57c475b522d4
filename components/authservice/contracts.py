from __future__ import annotations
from typing import Any, Callable, Dict, List, Literal, Optional, Protocol
from pydantic import BaseModel, Field, constr

# ---------- Unified Wire Format (UWF) ----------
class ErrorPayload(BaseModel):
    type: Literal["AUTH_ERROR","VALIDATION","NOT_FOUND","CONFLICT","UPSTREAM","INTERNAL"]
    code: constr(strip_whitespace=True, min_length=1)
    message: constr(strip_whitespace=True, min_length=1)
    details: Optional[Dict[str, Any]] = None

class MetaPayload(BaseModel):
    request_id: Optional[str] = None
    duration_ms: Optional[int] = None

class UWFResponse(BaseModel):
    ok: bool
    result: Optional[Any] = None
    error: Optional[ErrorPayload] = None
    meta: MetaPayload = Field(default_factory=MetaPayload)

# ---------- Domain Models ----------
class SessionRecord(BaseModel):
    token: str
    expires_at: int

class UserRecord(BaseModel):
    """Stored user document. Never serialised to clients; see `User`."""
    id: str
    email: str
    password_hash: str
    salt: str
    sessions: List[SessionRecord] = Field(default_factory=list)
    created_at: int = 0

    def public(self) -> "User":
        return User(id=self.id, email=self.email)

class User(BaseModel):
    id: str
    email: str

class AccessTokenClaims(BaseModel):
    sub: constr(min_length=1)
    iat: int
    exp: int
    jti: Optional[str] = None

class AuthResult(BaseModel):
    user: User
    access_token: str
    refresh_token: str

class SessionContext(BaseModel):
    user_id: str
    user: UserRecord
    refresh_token: str

# ---------- Ports (Contracts) ----------
class TokenSignerPort(Protocol):
    """
    Contract for access-token signing/verification.
    verify() raises TokenMalformed, TokenInvalidSignature or TokenExpired.
    """
    def sign(self, user_id: str, ttl_seconds: int) -> str: ...
    def verify(self, token: str) -> str: ...

class UserStorePort(Protocol):
    """
    Contract for user document persistence. `update` is an atomic
    read-modify-write of one user document and returns the stored result,
    or None when the user does not exist.
    """
    def insert(self, record: UserRecord) -> None: ...
    def get_by_id(self, user_id: str) -> Optional[UserRecord]: ...
    def get_by_email(self, email: str) -> Optional[UserRecord]: ...
    def update(self, user_id: str, fn: Callable[[UserRecord], UserRecord]) -> Optional[UserRecord]: ...

class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...

# ---------- Service I/O ----------
class SignupRequest(BaseModel):
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class AccessTokenResult(BaseModel):
    access_token: str
