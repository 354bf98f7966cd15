# tests/conftest.py
import asyncio

import jwt
import pytest

SIGNING_SECRET = "test-signing-secret-0123456789abcdef"
NOW = 1_700_000_000


def make_token(expiry: int, **claims) -> str:
    payload = {
        "iss": "https://hpe-greenlake-tenant.okta.com/oauth2/default",
        "sub": "subject",
        "exp": expiry,
        "iat": NOW,
        "cid": "clientID",
        "tenantId": "tenantID",
    }
    payload.update(claims)
    return jwt.encode(payload, SIGNING_SECRET, algorithm="HS256")


class FakeClock:
    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGenerator:
    """Returns (or raises) queued outcomes in order, then `default`."""

    def __init__(self, *outcomes, default=None) -> None:
        self.outcomes = list(outcomes)
        self.default = default
        self.calls = 0
        self.closed = False

    async def generate_token(self, tenant_id, client_id, client_secret):
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self):
        self.closed = True


class BlockingGenerator:
    """Blocks every call until `release` is set."""

    def __init__(self, token: str) -> None:
        self.token = token
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.cancelled = False
        self.calls = 0

    async def generate_token(self, tenant_id, client_id, client_secret):
        self.calls += 1
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.token

    async def aclose(self):
        return None


@pytest.fixture
def clock():
    return FakeClock()
