import pytest

from components.authservice.contracts import SessionRecord
from components.authservice.credentials import CredentialStore, PasswordHasher
from components.authservice.errors import UserNotFound
from components.authservice.sessions import SessionManager
from components.authservice.store import InMemoryUserStore

REFRESH_TTL = 14 * 24 * 3600


@pytest.fixture
def store():
    return InMemoryUserStore()


@pytest.fixture
def creds(store, clock):
    return CredentialStore(store, PasswordHasher(iterations=1000), clock=clock)


@pytest.fixture
def manager(store, clock):
    return SessionManager(store, refresh_ttl_seconds=REFRESH_TTL, clock=clock)


def test_create_session_appends_random_token(store, creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    token = manager.create_session(user.id)

    rec = store.get_by_id(user.id)
    assert len(rec.sessions) == 1
    assert rec.sessions[0].token == token
    assert rec.sessions[0].expires_at == clock.now + REFRESH_TTL
    assert len(token) == 128
    assert manager.validate(rec, token)


def test_sessions_are_isolated_between_users(store, creds, manager):
    alice = creds.create("alice@x.com", "Secret123")
    bob = creds.create("bob@x.com", "Secret123")
    bob_token = manager.create_session(bob.id)

    manager.create_session(alice.id)
    alice_token = manager.create_session(alice.id)

    assert manager.validate(store.get_by_id(bob.id), bob_token)
    assert len(store.get_by_id(bob.id).sessions) == 1
    assert not manager.validate(store.get_by_id(alice.id), bob_token)
    assert not manager.validate(store.get_by_id(bob.id), alice_token)


def test_multiple_concurrent_sessions(store, creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    first = manager.create_session(user.id)
    clock.advance(3600)
    second = manager.create_session(user.id)
    third = manager.create_session(user.id)

    rec = store.get_by_id(user.id)
    assert all(manager.validate(rec, t) for t in (first, second, third))

    assert manager.revoke(user.id, second)
    rec = store.get_by_id(user.id)
    assert manager.validate(rec, first)
    assert not manager.validate(rec, second)
    assert manager.validate(rec, third)

    # first expires one hour before third
    clock.advance(REFRESH_TTL - 1800)
    rec = store.get_by_id(user.id)
    assert not manager.validate(rec, first)
    assert manager.validate(rec, third)


def test_expiry_boundary(creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    user.sessions = [
        SessionRecord(token="past", expires_at=clock.now - 1),
        SessionRecord(token="now", expires_at=clock.now),
        SessionRecord(token="future", expires_at=clock.now + 1),
    ]
    assert manager.is_expired(user.sessions[0])
    assert manager.is_expired(user.sessions[1])
    assert not manager.is_expired(user.sessions[2])

    assert not manager.validate(user, "past")
    assert not manager.validate(user, "now")
    assert manager.validate(user, "future")


def test_duplicate_tokens_valid_if_any_entry_is_live(creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    user.sessions = [
        SessionRecord(token="dup", expires_at=clock.now - 10),
        SessionRecord(token="dup", expires_at=clock.now + 10),
    ]
    assert manager.find_valid_session(user, "dup") is user.sessions[1]


def test_validate_does_not_prune(store, creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    token = manager.create_session(user.id)
    clock.advance(REFRESH_TTL)

    rec = store.get_by_id(user.id)
    assert not manager.validate(rec, token)
    assert len(store.get_by_id(user.id).sessions) == 1


def test_prune_expired_removes_only_expired(store, creds, manager, clock):
    user = creds.create("a@x.com", "Secret123")
    old = manager.create_session(user.id)
    clock.advance(REFRESH_TTL)
    fresh = manager.create_session(user.id)

    assert manager.prune_expired(user.id) == 1
    tokens = [s.token for s in store.get_by_id(user.id).sessions]
    assert tokens == [fresh]
    assert old not in tokens
    assert manager.prune_expired(user.id) == 0


def test_revoke_unknown_token_returns_false(creds, manager):
    user = creds.create("a@x.com", "Secret123")
    manager.create_session(user.id)
    assert manager.revoke(user.id, "nope") is False


def test_empty_token_never_validates(creds, manager):
    user = creds.create("a@x.com", "Secret123")
    user.sessions = [SessionRecord(token="", expires_at=10**12)]
    assert not manager.validate(user, "")


def test_unknown_user_operations_raise(manager):
    with pytest.raises(UserNotFound):
        manager.create_session("missing")
    with pytest.raises(UserNotFound):
        manager.prune_expired("missing")
