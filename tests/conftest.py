import asyncio
import json

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real secrets and a developer .env out of the tests."""
    for key in ("TOKEN", "API_KEY", "SHARD_COUNT", "POLL_INTERVAL", "ORACLE_URL",
                "LOG_LEVEL", "METRICS_PORT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# ── aiohttp stand-ins ───────────────────────────────────────
class FakeResponse:
    def __init__(self, body: bytes, status: int = 200):
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body


class _Request:
    def __init__(self, response=None, exc=None):
        self._response = response
        self._exc = exc

    async def __aenter__(self):
        if self._exc is not None:
            raise self._exc
        return self._response

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Minimal ``aiohttp.ClientSession`` replacement recording requested URLs."""

    def __init__(self, body=b"", *, status=200, exc=None):
        if not isinstance(body, bytes):
            body = json.dumps(body).encode()
        self.urls: list[str] = []
        self._response = FakeResponse(body, status)
        self._exc = exc

    def get(self, url):
        self.urls.append(url)
        return _Request(self._response, self._exc)


@pytest.fixture
def fake_session():
    return FakeSession


def oracle_body(safe="7", propose="9.6", fast="12.4"):
    return {
        "status": "1",
        "message": "OK",
        "result": {
            "LastBlock": "19000000",
            "SafeGasPrice": safe,
            "ProposeGasPrice": propose,
            "FastGasPrice": fast,
            "suggestBaseFee": "6.5",
            "gasUsedRatio": "0.4,0.5,0.6",
        },
    }


@pytest.fixture
def make_body():
    return oracle_body


# ── discord stand-in ────────────────────────────────────────
class FakeDiscordClient:
    """Just the ``discord.Client`` surface the publisher touches."""

    def __init__(self, *, login_exc=None, connect_exc=None, presence_exc=None):
        self.login_exc = login_exc
        self.connect_exc = connect_exc
        self.presence_exc = presence_exc
        self.token = None
        self.presences: list[dict] = []
        self.closed = False
        self._ready = asyncio.Event()

    async def login(self, token):
        self.token = token
        if self.login_exc is not None:
            raise self.login_exc

    async def connect(self, *, reconnect=True):
        if self.connect_exc is not None:
            raise self.connect_exc
        self._ready.set()
        await asyncio.Event().wait()

    async def wait_until_ready(self):
        await self._ready.wait()

    def is_ready(self):
        return self._ready.is_set()

    def is_closed(self):
        return self.closed

    async def change_presence(self, *, status=None, activity=None):
        if self.presence_exc is not None:
            raise self.presence_exc
        self.presences.append({"status": status, "activity": activity})

    async def close(self):
        self.closed = True


@pytest.fixture
def discord_client():
    return FakeDiscordClient
