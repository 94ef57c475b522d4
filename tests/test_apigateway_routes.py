import pytest
from pydantic import ValidationError

from components.authservice import AuthConfig


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"x-request-id": "req-42"})
    assert r.headers["x-request-id"] == "req-42"
    assert client.get("/health").headers["x-request-id"]


def test_cors_exposes_token_headers(client):
    r = client.post(
        "/users",
        json={"email": "a@x.com", "password": "Secret123"},
        headers={"Origin": "http://localhost:4200"},
    )
    assert r.status_code == 201
    assert r.headers["access-control-allow-origin"] == "*"
    exposed = r.headers["access-control-expose-headers"].lower()
    assert "x-access-token" in exposed
    assert "x-refresh-token" in exposed


def test_cors_preflight_allows_auth_headers(client):
    r = client.options(
        "/users/me/access-token",
        headers={
            "Origin": "http://localhost:4200",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "x-refresh-token, _id",
        },
    )
    assert r.status_code == 200
    allowed = r.headers["access-control-allow-headers"].lower()
    assert "x-refresh-token" in allowed
    assert "_id" in allowed


def test_auth_config_reads_environment(monkeypatch):
    monkeypatch.setenv("AUTH_SECRET", "from-env")
    monkeypatch.setenv("ACCESS_TTL_SECONDS", "60")
    monkeypatch.setenv("REFRESH_TTL_SECONDS", "86400")
    cfg = AuthConfig()
    assert cfg.auth_secret.get_secret_value() == "from-env"
    assert cfg.access_ttl_seconds == 60
    assert "from-env" not in repr(cfg)


@pytest.mark.parametrize(
    "overrides",
    [
        {"auth_secret": ""},
        {"access_ttl_seconds": 0},
        {"access_ttl_seconds": 900, "refresh_ttl_seconds": 3600},
        {"refresh_token_bytes": 8},
    ],
)
def test_auth_config_rejects_unsafe_values(overrides):
    with pytest.raises(ValidationError):
        AuthConfig(**overrides)
