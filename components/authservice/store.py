from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Callable, Dict, Optional

from .contracts import SessionRecord, UserRecord, UserStorePort
from .errors import DuplicateEmail, StoreUnavailable

log = logging.getLogger("authservice.store")

Mutator = Callable[[UserRecord], UserRecord]


class InMemoryUserStore(UserStorePort):
    """Thread-safe in-memory user store with a coarse-grained lock.

    Records are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self):
        self._by_id: Dict[str, UserRecord] = {}
        self._id_by_email: Dict[str, str] = {}
        self._lock = threading.RLock()

    def insert(self, record: UserRecord) -> None:
        with self._lock:
            if record.email in self._id_by_email:
                raise DuplicateEmail()
            self._by_id[record.id] = record.model_copy(deep=True)
            self._id_by_email[record.email] = record.id

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            rec = self._by_id.get(user_id)
            return rec.model_copy(deep=True) if rec else None

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            user_id = self._id_by_email.get(email)
            if user_id is None:
                return None
            return self._by_id[user_id].model_copy(deep=True)

    def update(self, user_id: str, fn: Mutator) -> Optional[UserRecord]:
        with self._lock:
            current = self._by_id.get(user_id)
            if current is None:
                return None
            new_value = fn(current.model_copy(deep=True))
            self._by_id[user_id] = new_value
            return new_value.model_copy(deep=True)


class SqliteUserStore(UserStorePort):
    """
    SQLite-backed user store. Sessions live in a JSON column of the user row,
    so every update is a single-row read-modify-write inside one transaction.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init()

    def _conn(self) -> sqlite3.Connection:
        con = sqlite3.connect(str(self.db_path), timeout=5.0, isolation_level=None)
        con.row_factory = sqlite3.Row
        return con

    def _init(self) -> None:
        try:
            con = self._conn()
            try:
                con.execute(
                    """
                    CREATE TABLE IF NOT EXISTS users (
                      id TEXT PRIMARY KEY,
                      email TEXT UNIQUE NOT NULL,
                      password_hash TEXT NOT NULL,
                      salt TEXT NOT NULL,
                      sessions_json TEXT NOT NULL,
                      created_at INTEGER NOT NULL
                    );
                    """
                )
            finally:
                con.close()
        except sqlite3.Error as ex:
            log.error("store_init_failed path=%s error=%s", self.db_path, ex)
            raise StoreUnavailable() from ex

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> UserRecord:
        # pydantic's ValidationError and JSONDecodeError are both ValueErrors.
        try:
            sessions = [SessionRecord.model_validate(s) for s in json.loads(row["sessions_json"] or "[]")]
            return UserRecord(
                id=str(row["id"]),
                email=str(row["email"]),
                password_hash=str(row["password_hash"]),
                salt=str(row["salt"]),
                sessions=sessions,
                created_at=int(row["created_at"]),
            )
        except (TypeError, ValueError) as ex:
            log.error("store_row_corrupt user_id=%s error=%s", row["id"], ex)
            raise StoreUnavailable() from ex

    @staticmethod
    def _sessions_json(record: UserRecord) -> str:
        return json.dumps([s.model_dump() for s in record.sessions], separators=(",", ":"))

    def insert(self, record: UserRecord) -> None:
        try:
            con = self._conn()
            try:
                con.execute(
                    """
                    INSERT INTO users (id, email, password_hash, salt, sessions_json, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (record.id, record.email, record.password_hash, record.salt,
                     self._sessions_json(record), record.created_at),
                )
            finally:
                con.close()
        except sqlite3.IntegrityError as ex:
            raise DuplicateEmail() from ex
        except sqlite3.Error as ex:
            log.error("store_insert_failed error=%s", ex)
            raise StoreUnavailable() from ex

    def _get_one(self, column: str, value: str) -> Optional[UserRecord]:
        try:
            con = self._conn()
            try:
                row = con.execute(f"SELECT * FROM users WHERE {column} = ?", (value,)).fetchone()
            finally:
                con.close()
        except sqlite3.Error as ex:
            log.error("store_read_failed column=%s error=%s", column, ex)
            raise StoreUnavailable() from ex
        return self._row_to_record(row) if row is not None else None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._get_one("id", user_id)

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        return self._get_one("email", email)

    def update(self, user_id: str, fn: Mutator) -> Optional[UserRecord]:
        try:
            con = self._conn()
            try:
                con.execute("BEGIN IMMEDIATE")
                row = con.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
                if row is None:
                    con.execute("ROLLBACK")
                    return None
                new_value = fn(self._row_to_record(row))
                con.execute(
                    "UPDATE users SET email = ?, password_hash = ?, salt = ?, sessions_json = ? WHERE id = ?",
                    (new_value.email, new_value.password_hash, new_value.salt,
                     self._sessions_json(new_value), user_id),
                )
                con.execute("COMMIT")
                return new_value
            except BaseException:
                if con.in_transaction:
                    con.execute("ROLLBACK")
                raise
            finally:
                con.close()
        except sqlite3.Error as ex:
            log.error("store_update_failed user_id=%s error=%s", user_id, ex)
            raise StoreUnavailable() from ex


def build_user_store(path: str) -> UserStorePort:
    if not path:
        return InMemoryUserStore()
    return SqliteUserStore(Path(path))
