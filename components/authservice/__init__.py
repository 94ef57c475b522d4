from .service import AuthService, get_auth_service, set_auth_service
from .crypto import HS256TokenSigner, SystemClock
from .credentials import CredentialStore, PasswordHasher
from .sessions import SessionManager
from .store import InMemoryUserStore, SqliteUserStore, build_user_store
from .config import AuthConfig
from .deps import authenticate, verify_session
from .routes import router as auth_router, register_error_handlers

__all__ = [
    "AuthService",
    "get_auth_service",
    "set_auth_service",
    "HS256TokenSigner",
    "SystemClock",
    "CredentialStore",
    "PasswordHasher",
    "SessionManager",
    "InMemoryUserStore",
    "SqliteUserStore",
    "build_user_store",
    "AuthConfig",
    "authenticate",
    "verify_session",
    "auth_router",
    "register_error_handlers",
]
