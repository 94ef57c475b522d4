from __future__ import annotations
import base64, binascii, json, hmac, hashlib, secrets, time, uuid
from typing import Any, Dict, Optional
from pydantic import ValidationError as PydanticValidationError
from .contracts import AccessTokenClaims, ClockPort, TokenSignerPort
from .errors import TokenExpired, TokenInvalidSignature, TokenMalformed

def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")

def _unb64url(s: str) -> bytes:
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


def new_refresh_token(nbytes: int = 64) -> str:
    return secrets.token_hex(nbytes)


def tokens_equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class HS256TokenSigner(TokenSignerPort):
    """
    HS256 JWT signer for short-lived access tokens.
    kid is written to the header so tokens can later be versioned by key;
    verification accepts a single key.
    """
    def __init__(self, secret: str, kid: Optional[str] = "primary", clock: Optional[ClockPort] = None):
        if not secret:
            raise ValueError("HS256TokenSigner requires non-empty secret")
        self._secret = secret.encode("utf-8")
        self._kid = kid
        self.clock = clock or SystemClock()

    def __repr__(self) -> str:
        return f"HS256TokenSigner(kid={self._kid!r})"

    def sign(self, user_id: str, ttl_seconds: int) -> str:
        now = self.clock.now_utc_ts()
        claims = AccessTokenClaims(sub=user_id, iat=now, exp=now + int(ttl_seconds), jti=uuid.uuid4().hex)
        return self._encode(claims.model_dump())

    def verify(self, token: str) -> str:
        return self.decode(token).sub

    def decode(self, token: str) -> AccessTokenClaims:
        if not token:
            raise TokenMalformed("Access token is missing")
        parts = token.split(".")
        if len(parts) != 3:
            raise TokenMalformed("Invalid token format")
        header_b64, payload_b64, sig_b64 = parts

        # Signature covers the raw segments, so any edit to them lands here.
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        # Compare encoded forms; decoding would ignore the trailing padding bits.
        if not hmac.compare_digest(_b64url(expected_sig).encode("utf-8"), sig_b64.encode("utf-8")):
            raise TokenInvalidSignature("Signature mismatch")

        try:
            header = json.loads(_unb64url(header_b64).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            raise TokenMalformed("Invalid token header")
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise TokenMalformed("Unsupported token algorithm")

        try:
            claims = AccessTokenClaims.model_validate(json.loads(_unb64url(payload_b64).decode("utf-8")))
        except (binascii.Error, UnicodeDecodeError, ValueError, PydanticValidationError):
            raise TokenMalformed("Invalid token payload")

        if self.clock.now_utc_ts() >= claims.exp:
            raise TokenExpired()
        return claims

    def _encode(self, claims: Dict[str, Any]) -> str:
        headers = {"alg": "HS256", "typ": "JWT"}
        if self._kid:
            headers["kid"] = self._kid
        header_b64 = _b64url(json.dumps(headers, separators=(",",":")).encode("utf-8"))
        payload_b64 = _b64url(json.dumps(claims, separators=(",",":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        sig = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        return f"{header_b64}.{payload_b64}.{_b64url(sig)}"
