import pytest
from fastapi.testclient import TestClient

from components.apigateway.app import create_app
from components.apigateway.settings import AppSettings
from components.authservice import AuthConfig, AuthService


class FakeClock:
    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def now_utc_ts(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += int(seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cfg():
    # Low PBKDF2 cost keeps the suite fast.
    return AuthConfig(auth_secret="test-secret", pbkdf2_iterations=1000)


@pytest.fixture
def auth_service(cfg, clock):
    return AuthService.from_config(cfg, clock=clock)


@pytest.fixture
def client(auth_service):
    app = create_app(AppSettings(log_level="WARNING"), auth_service=auth_service)
    return TestClient(app)
