# conftest.py
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from redis.exceptions import ConnectionError as RedisConnectionError
from app.main import app
from app.db.redis_client import redis_client
from app.services import keys


class FakePipeline:
    def __init__(self, store):
        self.store = store
        self.ops = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.ops.clear()

    def __getattr__(self, name):
        command = getattr(self.store, "_" + name)

        def queue(*args, **kwargs):
            self.ops.append((command, args, kwargs))
            return self

        return queue

    async def execute(self):
        if self.store.fail:
            raise RedisConnectionError("store unavailable")
        results = [command(*args, **kwargs) for command, args, kwargs in self.ops]
        self.ops.clear()
        return results


class FakeRedis:
    """In-memory stand-in for the handful of commands the collector issues."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.fail = False

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def _check(self):
        if self.fail:
            raise RedisConnectionError("store unavailable")

    def _lpush(self, key, *values):
        items = self.data.setdefault(key, [])
        for value in values:
            items.insert(0, value)
        return len(items)

    def _hincrby(self, key, field, amount=1):
        hash_ = self.data.setdefault(key, {})
        hash_[field] = str(int(hash_.get(field, 0)) + amount)
        return int(hash_[field])

    def _sadd(self, key, *members):
        members_ = self.data.setdefault(key, set())
        before = len(members_)
        members_.update(members)
        return len(members_) - before

    def _set(self, key, value, ex=None):
        self.data[key] = str(value)
        if ex is not None:
            self.ttls[key] = ex
        return True

    def _incrby(self, key, amount=1):
        self.data[key] = str(int(self.data.get(key, 0)) + amount)
        return int(self.data[key])

    def _expire(self, key, seconds):
        if key not in self.data:
            return False
        self.ttls[key] = seconds
        return True

    async def get(self, key):
        self._check()
        value = self.data.get(key)
        return value if isinstance(value, str) else None

    async def lrange(self, key, start, end):
        self._check()
        return list(self.data.get(key, []))[start:end + 1]

    async def hgetall(self, key):
        self._check()
        return dict(self.data.get(key, {}))

    async def scard(self, key):
        self._check()
        return len(self.data.get(key, set()))


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_redis():
    fake = FakeRedis()
    redis_client.redis = fake
    yield fake
    redis_client.redis = None


@pytest_asyncio.fixture
async def async_client(fake_redis):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_event(event="screen_view", **overrides):
    payload = {
        "event": event,
        "timestamp": "2026-10-19T12:00:00Z",
        "session_id": "session-1",
        "properties": {"screen_name": "home"},
        "device": {
            "device_model": "iPhone15,2",
            "os_version": "17.0",
            "app_version": "1.0",
            "build_number": "42",
            "locale": "en_GB",
            "timezone": "Europe/London"
        }
    }
    payload.update(overrides)
    return payload


def make_batch(events):
    return {"events": events, "sent_at": "2026-10-19T12:00:05Z"}


@pytest.fixture
def today():
    return keys.today_key()
