import os
import sys
import asyncio
import inspect
import json
from urllib.parse import parse_qs

import httpx
import pytest

# Ensure project root is on sys.path so `import app` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read at import time; never talk to a real Amadeus account here
os.environ.setdefault("AMADEUS_CLIENT_ID", "test-client-id")
os.environ.setdefault("AMADEUS_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("AMADEUS_ENV", "test")

from app.config import settings  # noqa: E402
from app.amadeus.auth import TokenManager  # noqa: E402
from app.amadeus.client import AmadeusClient  # noqa: E402
from app.obs.metrics import reset_metrics  # noqa: E402


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None

TOKEN_PATH = "/v1/security/oauth2/token"
SEARCH_PATH = "/v2/shopping/flight-offers"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAmadeus:
    """Stands in for the Amadeus API behind an httpx.MockTransport."""

    def __init__(self):
        self.token_requests = []
        self.search_requests = []
        self.token_status = 200
        self.token_body = None  # None -> issue TOKEN-<n> with expires_in
        self.expires_in = 1799
        self.search_status = 200
        self.search_text = '{"meta":{"count":0},"data":[]}'

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # Yield to the loop like a real network call would
        await asyncio.sleep(0)
        if request.url.path == TOKEN_PATH:
            self.token_requests.append(parse_qs(request.content.decode()))
            if self.token_body is not None:
                return httpx.Response(self.token_status, text=self.token_body)
            body = {"access_token": f"TOKEN-{len(self.token_requests)}", "expires_in": self.expires_in}
            return httpx.Response(self.token_status, text=json.dumps(body))
        if request.url.path == SEARCH_PATH:
            self.search_requests.append({
                "headers": request.headers,
                "json": json.loads(request.content),
            })
            return httpx.Response(
                self.search_status,
                text=self.search_text,
                headers={"Content-Type": "application/json"},
            )
        return httpx.Response(404, text="not found")

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(autouse=True)
def _fresh_metrics():
    reset_metrics()
    yield


@pytest.fixture
def fake_amadeus():
    return FakeAmadeus()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def amadeus_client(fake_amadeus, clock):
    http = fake_amadeus.http_client()
    tokens = TokenManager(settings, http, clock=clock)
    return AmadeusClient(settings, http=http, tokens=tokens)
