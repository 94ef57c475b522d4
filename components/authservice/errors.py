from __future__ import annotations
from typing import Dict, Optional
from .contracts import ErrorPayload


class AuthServiceError(Exception):
    type: str = "INTERNAL"
    code: str = "internal_error"
    message: str = "Internal server error"
    status_code: int = 500
    retriable: bool = False

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict] = None):
        if message:
            self.message = message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> ErrorPayload:
        return ErrorPayload(type=self.type, code=self.code, message=self.message, details=self.details)


class ValidationError(AuthServiceError):
    type = "VALIDATION"
    code = "validation_error"
    message = "Validation error"
    status_code = 422


class DuplicateEmail(AuthServiceError):
    type = "CONFLICT"
    code = "duplicate_email"
    message = "An account with this email already exists"
    status_code = 409


class InvalidCredentials(AuthServiceError):
    # Same text whether the email exists or not.
    type = "AUTH_ERROR"
    code = "invalid_credentials"
    message = "Invalid email or password"
    status_code = 401


class Unauthenticated(AuthServiceError):
    type = "AUTH_ERROR"
    code = "unauthenticated"
    message = "Authentication required"
    status_code = 401


class TokenMalformed(Unauthenticated):
    code = "token_malformed"
    message = "Access token is malformed"


class TokenExpired(Unauthenticated):
    code = "token_expired"
    message = "Access token has expired"


class TokenInvalidSignature(Unauthenticated):
    code = "token_invalid_signature"
    message = "Access token signature is invalid"


class UserNotFound(AuthServiceError):
    type = "AUTH_ERROR"
    code = "user_not_found"
    message = "User not found. Make sure that the refresh token and user id are correct"
    status_code = 401


class SessionInvalid(AuthServiceError):
    type = "AUTH_ERROR"
    code = "session_invalid"
    message = "Refresh token has expired or the session is invalid"
    status_code = 401


class StoreUnavailable(AuthServiceError):
    type = "UPSTREAM"
    code = "store_unavailable"
    message = "User store is unavailable"
    status_code = 503
    retriable = True
