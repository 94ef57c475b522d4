from __future__ import annotations
import hashlib, hmac, logging, re, secrets, uuid
from typing import Optional
from .contracts import ClockPort, UserRecord, UserStorePort
from .crypto import SystemClock, tokens_equal
from .errors import InvalidCredentials, ValidationError

log = logging.getLogger("authservice.credentials")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class PasswordHasher:
    """
    Salted PBKDF2-SHA256 hasher. Encoded form carries its own parameters:
    pbkdf2_sha256$<iterations>$<salt>$<hex digest>
    """
    def __init__(self, iterations: int = 100_000):
        self.iterations = iterations

    def new_salt(self) -> str:
        return secrets.token_hex(16)

    def hash(self, password: str, salt: str) -> str:
        dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), self.iterations, dklen=32)
        return f"pbkdf2_sha256${self.iterations}${salt}${dk.hex()}"

    def verify(self, password: str, encoded: str) -> bool:
        try:
            algo, iters_s, salt, hex_dk = encoded.split("$")
            iterations = int(iters_s)
        except ValueError:
            return False
        if algo != "pbkdf2_sha256":
            return False
        dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations, dklen=32).hex()
        return hmac.compare_digest(dk, hex_dk)


class CredentialStore:
    """Creates users and checks email/password pairs on top of a UserStorePort."""

    def __init__(
        self,
        store: UserStorePort,
        hasher: Optional[PasswordHasher] = None,
        *,
        min_password_length: int = 8,
        clock: Optional[ClockPort] = None,
    ):
        self.store = store
        self.hasher = hasher or PasswordHasher()
        self.min_password_length = min_password_length
        self.clock = clock or SystemClock()
        # Verified against when the email is unknown, so both failure paths hash once.
        self._dummy_hash = self.hasher.hash(secrets.token_hex(8), self.hasher.new_salt())

    def create(self, email: str, password: str) -> UserRecord:
        email = normalize_email(email)
        self._check_email(email)
        self._check_password(password)
        salt = self.hasher.new_salt()
        record = UserRecord(
            id=uuid.uuid4().hex,
            email=email,
            password_hash=self.hasher.hash(password, salt),
            salt=salt,
            created_at=self.clock.now_utc_ts(),
        )
        self.store.insert(record)
        log.info("user_created user_id=%s", record.id)
        return record

    def find_by_credentials(self, email: str, password: str) -> UserRecord:
        rec = self.store.get_by_email(normalize_email(email))
        if rec is None:
            self.hasher.verify(password or "", self._dummy_hash)
            raise InvalidCredentials()
        if not self.hasher.verify(password or "", rec.password_hash):
            raise InvalidCredentials()
        return rec

    def find_by_id_and_session_token(self, user_id: str, refresh_token: str) -> Optional[UserRecord]:
        rec = self.store.get_by_id(user_id)
        if rec is None:
            return None
        if any(tokens_equal(s.token, refresh_token) for s in rec.sessions):
            return rec
        return None

    # --------- Helpers ----------
    def _check_email(self, email: str) -> None:
        if not EMAIL_RE.match(email):
            raise ValidationError("Email address is not valid", details={"field": "email"})

    def _check_password(self, password: str) -> None:
        password = password or ""
        if len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters",
                details={"field": "password"},
            )
        if not (re.search(r"[A-Za-z]", password) and re.search(r"\d", password)):
            raise ValidationError(
                "Password must contain at least one letter and one digit",
                details={"field": "password"},
            )
