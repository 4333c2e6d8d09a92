"""
Test Configuration Module
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pytest
from redis.exceptions import ResponseError

from token_repository.config import get_settings
from token_repository.domain.token import AuthenticationToken, EntityType, TokenType
from token_repository.repositories.redis.token_repo import RedisTokenRepository


class FrozenClock:
    """Controllable UTC clock"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakePipeline:
    """MULTI/EXEC pipeline double, commands are queued and applied together"""

    def __init__(self, redis: "FakeRedis", transaction: bool):
        self.redis = redis
        self.transaction = transaction
        self.queue: list[tuple[str, tuple, dict]] = []
        self.released = False

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.queue.clear()
        self.released = True

    def get(self, key: bytes) -> "FakePipeline":
        self.queue.append(("GET", (key,), {}))
        return self

    def set(self, key: bytes, value: bytes, ex: Optional[int] = None, xx: bool = False) -> "FakePipeline":
        self.queue.append(("SET", (key, value), {"ex": ex, "xx": xx}))
        return self

    def delete(self, *keys: bytes) -> "FakePipeline":
        self.queue.append(("DEL", keys, {}))
        return self

    async def execute(self) -> list[Any]:
        if self.redis.execute_delay is not None:
            await asyncio.sleep(self.redis.execute_delay)
        if self.redis.fail_with is not None:
            raise self.redis.fail_with
        self.redis.commands.append(("MULTI",))
        results = [self.redis.apply(name, args, kwargs) for name, args, kwargs in self.queue]
        self.redis.commands.append(("EXEC",))
        self.queue.clear()
        return results


class FakeRedis:
    """
    In-memory double of the async Redis client

    Implements the commands the repository issues. Keys expire according
    to the shared clock, so TTL behaviour can be tested without sleeping.
    """

    def __init__(self, clock: Callable[[], datetime]):
        self.clock = clock
        self.store: dict[bytes, bytes] = {}
        self.deadlines: dict[bytes, datetime] = {}
        self.ttls: dict[bytes, int] = {}
        self.commands: list[tuple] = []
        self.pipelines: list[FakePipeline] = []
        self.fail_with: Optional[Exception] = None
        self.execute_delay: Optional[float] = None
        self.close_calls = 0

    def _expire(self, key: bytes) -> None:
        deadline = self.deadlines.get(key)
        if deadline is not None and self.clock() >= deadline:
            self.store.pop(key, None)
            self.deadlines.pop(key, None)
            self.ttls.pop(key, None)

    def apply(self, name: str, args: tuple, kwargs: dict) -> Any:
        self.commands.append((name, *args))
        if name == "GET":
            (key,) = args
            self._expire(key)
            return self.store.get(key)
        if name == "SET":
            key, value = args
            ex, xx = kwargs.get("ex"), kwargs.get("xx", False)
            if ex is not None and ex <= 0:
                raise ResponseError("invalid expire time in 'set' command")
            self._expire(key)
            if xx and key not in self.store:
                return None
            self.store[key] = value
            self.deadlines.pop(key, None)
            self.ttls.pop(key, None)
            if ex is not None:
                self.deadlines[key] = self.clock() + timedelta(seconds=ex)
                self.ttls[key] = ex
            return True
        if name == "DEL":
            deleted = 0
            for key in args:
                self._expire(key)
                if self.store.pop(key, None) is not None:
                    deleted += 1
                self.deadlines.pop(key, None)
                self.ttls.pop(key, None)
            return deleted
        raise AssertionError(f"Unexpected command {name}")

    async def get(self, key: bytes) -> Optional[bytes]:
        if self.fail_with is not None:
            raise self.fail_with
        return self.apply("GET", (key,), {})

    async def set(self, key: bytes, value: bytes, ex: Optional[int] = None, xx: bool = False) -> Any:
        if self.fail_with is not None:
            raise self.fail_with
        return self.apply("SET", (key, value), {"ex": ex, "xx": xx})

    async def delete(self, *keys: bytes) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        return self.apply("DEL", keys, {})

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        pipe = FakePipeline(self, transaction)
        self.pipelines.append(pipe)
        return pipe

    async def ping(self) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        return True

    async def aclose(self) -> None:
        self.close_calls += 1


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at a fixed instant"""
    return FrozenClock(datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def fake_redis(clock) -> FakeRedis:
    """Redis double sharing the test clock"""
    return FakeRedis(clock)


@pytest.fixture
def repository(fake_redis, clock) -> RedisTokenRepository:
    """Repository backed by the Redis double"""
    return RedisTokenRepository(fake_redis, clock=clock)


@pytest.fixture
def make_token(clock) -> Callable[..., AuthenticationToken]:
    """Factory for tokens relative to the test clock"""

    def _make_token(
        expires_in: float = 3600,
        refresh_in: float = 1800,
        entity_type: str = EntityType.APPLICATION,
        token_type: str = TokenType.SIMPLE,
        id: str = "foo",
        secret: str = "bar",
    ) -> AuthenticationToken:
        return AuthenticationToken(
            entity_type=entity_type,
            token_type=token_type,
            expiry=clock() + timedelta(seconds=expires_in),
            id=id,
            secret=secret,
            refresh=clock() + timedelta(seconds=refresh_in),
        )

    return _make_token


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; drop them around each test"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
