# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""FakeRedis stub and fixtures for cache adapter tests."""

from __future__ import annotations

import re

import pytest
from redis.exceptions import ResponseError

from flycache.cache.adapters.redis import RedisCacheAdapter


def _glob_match(pattern: str, name: str) -> bool:
    """Match like Redis KEYS: `*`, `?`, `[...]`, and `\\` escaping the next character."""
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                parts.append(re.escape(char))
            else:
                body = pattern[i + 1 : end].replace("\\", "\\\\")
                parts.append(f"[{body}]")
                i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return re.fullmatch("".join(parts), name, re.DOTALL) is not None


class FakeRedis:
    """In-memory stub matching the subset of redis.asyncio.Redis the adapter uses.

    Time only moves when a test calls :meth:`advance`. Every command is
    recorded in :attr:`commands` so tests can count round trips.
    """

    def __init__(self, reject_flushdb: bool = False) -> None:
        self._store: dict[str, bytes] = {}
        self._expires_at: dict[str, float] = {}
        self.now = 0.0
        self.reject_flushdb = reject_flushdb
        self.commands: list[str] = []
        self.closed = False

    def advance(self, seconds: float) -> None:
        self.now += seconds

    @staticmethod
    def _name(key: bytes | str) -> str:
        return key.decode() if isinstance(key, bytes) else key

    def _alive(self, name: str) -> bool:
        expires_at = self._expires_at.get(name)
        if expires_at is not None and expires_at <= self.now:
            self._store.pop(name, None)
            self._expires_at.pop(name, None)
        return name in self._store

    def _write(self, name: str, value: bytes, ex: int | None = None) -> None:
        self._store[name] = value
        if ex is None:
            self._expires_at.pop(name, None)
        else:
            self._expires_at[name] = self.now + ex

    async def get(self, key: str) -> bytes | None:
        self.commands.append("GET")
        name = self._name(key)
        return self._store[name] if self._alive(name) else None

    async def mget(self, keys: list[bytes | str]) -> list[bytes | None]:
        self.commands.append("MGET")
        result = []
        for key in keys:
            name = self._name(key)
            result.append(self._store[name] if self._alive(name) else None)
        return result

    async def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self.commands.append("SET")
        if ex is not None and ex <= 0:
            raise ResponseError("invalid expire time in 'set' command")
        self._write(self._name(key), value, ex)
        return True

    async def setnx(self, key: str, value: bytes) -> bool:
        self.commands.append("SETNX")
        name = self._name(key)
        if self._alive(name):
            return False
        self._write(name, value)
        return True

    async def mset(self, mapping: dict[str, bytes]) -> bool:
        self.commands.append("MSET")
        for key, value in mapping.items():
            self._write(self._name(key), value)
        return True

    async def delete(self, *keys: bytes | str) -> int:
        self.commands.append("DEL")
        count = 0
        for key in keys:
            name = self._name(key)
            if self._alive(name):
                del self._store[name]
                self._expires_at.pop(name, None)
                count += 1
        return count

    async def exists(self, *keys: str) -> int:
        self.commands.append("EXISTS")
        return sum(1 for k in keys if self._alive(self._name(k)))

    async def keys(self, pattern: str = "*") -> list[bytes]:
        self.commands.append("KEYS")
        return [
            name.encode()
            for name in list(self._store)
            if self._alive(name) and _glob_match(pattern, name)
        ]

    async def ttl(self, key: str) -> int:
        self.commands.append("TTL")
        name = self._name(key)
        if not self._alive(name):
            return -2
        expires_at = self._expires_at.get(name)
        if expires_at is None:
            return -1
        return int(expires_at - self.now + 0.5)

    async def expire(self, key: str, seconds: int) -> bool:
        self.commands.append("EXPIRE")
        name = self._name(key)
        if not self._alive(name):
            return False
        self._expires_at[name] = self.now + seconds
        return True

    async def flushdb(self) -> bool:
        self.commands.append("FLUSHDB")
        if self.reject_flushdb:
            raise ResponseError("unknown command 'FLUSHDB'")
        self._store.clear()
        self._expires_at.clear()
        return True

    async def dbsize(self) -> int:
        self.commands.append("DBSIZE")
        return sum(1 for name in list(self._store) if self._alive(name))

    async def ping(self) -> bool:
        self.commands.append("PING")
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def adapter(fake_redis: FakeRedis) -> RedisCacheAdapter:
    return RedisCacheAdapter(fake_redis)
