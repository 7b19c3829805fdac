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
"""Redis-backed cache adapter."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, cast

from redis.exceptions import ResponseError

from flycache.cache.types import TTL_MISSING, TTL_NO_EXPIRY, Deferred, Expiry, resolve_value
from flycache.kernel.exceptions import SerializationException

_logger = logging.getLogger(__name__)

_ZERO = timedelta(0)

_GLOB_SPECIAL_RE = re.compile(r"([*?\[\]\\])")


def _seconds(ttl: timedelta) -> int:
    # Redis rejects an expiry of 0 seconds.
    return max(1, int(ttl.total_seconds()))


class RedisCacheAdapter:
    """Cache adapter that delegates to a ``redis.asyncio.Redis``-like client.

    Values are JSON-serialized before storage so that any JSON-compatible
    Python object can be cached transparently. Keys are stored as
    ``namespace + str(key)`` and read back as ``str``.

    The client is shared and owned by the caller: :meth:`close` leaves it
    open. Errors raised by the client propagate unchanged, and operations
    made of several round trips (:meth:`update`, :meth:`update_expire` with
    a zero duration, the producer variants) are not atomic; whatever the
    earlier steps already changed stays changed.
    """

    def __init__(self, client: Any, namespace: str = "", default_ttl: timedelta | None = None) -> None:
        self._client = client
        self._namespace = namespace
        self._default_ttl = default_ttl if default_ttl is not None else _ZERO

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _key(self, key: Any) -> str:
        return f"{self._namespace}{key}"

    def _strip(self, name: bytes | str) -> str:
        text = name.decode() if isinstance(name, bytes) else name
        return text.removeprefix(self._namespace)

    def _pattern(self) -> str:
        return _GLOB_SPECIAL_RE.sub(r"\\\1", self._namespace) + "*"

    def _encode(self, key: Any, value: Any) -> bytes:
        try:
            return json.dumps(value).encode()
        except (TypeError, ValueError) as exc:
            raise SerializationException(
                f"Cannot serialize value for key '{key}': {exc}",
                code="CACHE_SERIALIZATION",
                context={"key": str(key), "type": type(value).__name__},
            ) from exc

    def _decode(self, key: Any, raw: bytes | str | None) -> Any | None:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            return None

    def _ttl(self, ttl: timedelta | None) -> timedelta:
        return self._default_ttl if ttl is None else ttl

    # ------------------------------------------------------------------
    # Single-key operations
    # ------------------------------------------------------------------

    async def set(self, key: Any, value: Any, ttl: timedelta | None = None) -> None:
        """Store *value* under *key*.

        It does not expire if *ttl* is zero. It deletes *key* if *ttl* is
        negative or *value* is ``None``.
        """
        ttl = self._ttl(ttl)
        name = self._key(key)
        if value is None or ttl < _ZERO:
            await self._client.delete(name)
        elif ttl == _ZERO:
            await self._client.set(name, self._encode(key, value))
        else:
            await self._client.set(name, self._encode(key, value), ex=_seconds(ttl))

    async def get(self, key: Any) -> Any | None:
        """Retrieve and deserialize a cached value, or ``None`` if missing."""
        raw = await self._client.get(self._key(key))
        return self._decode(key, raw)

    async def update(self, key: Any, value: Any) -> tuple[Any | None, bool]:
        """Replace the value of *key* keeping its expiration.

        Returns ``(old_value, existed)``. A missing key is left missing and
        yields ``(None, False)``. A ``None`` *value* deletes the key.
        """
        name = self._key(key)
        ttl = await self._client.ttl(name)
        if ttl == TTL_MISSING:
            return None, False

        # Encoded before any write so a bad value leaves the key untouched.
        encoded = self._encode(key, value) if value is not None else None
        old_value = self._decode(key, await self._client.get(name))

        if encoded is None:
            await self._client.delete(name)
        elif ttl == TTL_NO_EXPIRY:
            await self._client.set(name, encoded)
        else:
            await self._client.set(name, encoded, ex=max(1, ttl))
        return old_value, True

    async def update_expire(self, key: Any, ttl: timedelta) -> Expiry:
        """Change the expiration of *key* and return the previous one.

        Returns :meth:`Expiry.not_found` without touching anything when the
        key does not exist. A negative *ttl* deletes the key; zero rewrites
        the current value without expiry.
        """
        name = self._key(key)
        old = Expiry.from_ttl(await self._client.ttl(name))
        if not old.exists:
            return old

        if ttl < _ZERO:
            await self._client.delete(name)
        elif ttl > _ZERO:
            await self._client.expire(name, _seconds(ttl))
        else:
            raw = await self._client.get(name)
            if raw is None:
                _logger.debug("Key '%s' vanished before its expiry could be cleared", key)
            else:
                await self._client.set(name, raw)
        return old

    async def get_expire(self, key: Any) -> timedelta:
        """Return the time left before *key* expires.

        ``timedelta(0)`` means it never expires, ``timedelta(seconds=-1)``
        means it does not exist.
        """
        return (await self.get_expiry(key)).to_timedelta()

    async def get_expiry(self, key: Any) -> Expiry:
        """Return the expiration state of *key*."""
        return Expiry.from_ttl(await self._client.ttl(self._key(key)))

    async def set_if_not_exist(self, key: Any, value: Any, ttl: timedelta | None = None) -> bool:
        """Store *value* only if *key* is absent; return whether it was stored.

        *value* may be a :class:`Deferred`; it is resolved first and a
        ``None`` result leaves the key untouched and returns ``False``.
        A negative *ttl* or a ``None`` value deletes the key instead and
        returns whether something was deleted.
        """
        if isinstance(value, Deferred):
            value = await value.resolve()
            if value is None:
                return False

        ttl = self._ttl(ttl)
        name = self._key(key)
        if ttl < _ZERO or value is None:
            count = await self._client.delete(name)
            return cast(bool, count > 0)

        stored = await self._client.setnx(name, self._encode(key, value))
        if stored and ttl > _ZERO:
            # Separate round trip: a failure here leaves the key without expiry.
            await self._client.expire(name, _seconds(ttl))
        return bool(stored)

    async def set_if_not_exist_with_producer(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> bool:
        """Store the result of *producer* if *key* is absent.

        Existence is checked with a plain read, so concurrent callers may
        all run *producer*. A ``None`` result stores nothing.
        """
        if await self._client.get(self._key(key)) is not None:
            return False
        value = await Deferred(producer).resolve()
        if value is None:
            return False
        await self.set(key, value, ttl)
        return True

    async def set_if_not_exist_with_producer_lock(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> bool:
        """Same as :meth:`set_if_not_exist_with_producer`.

        No lock is taken here; mutual exclusion around *producer*, if any,
        belongs to the cache layer calling this adapter.
        """
        return await self.set_if_not_exist_with_producer(key, producer, ttl)

    async def get_or_set(self, key: Any, value: Any, ttl: timedelta | None = None) -> Any | None:
        """Return the cached value of *key*, storing *value* first on a miss.

        A :class:`Deferred` *value* is only resolved on a miss.
        """
        raw = await self._client.get(self._key(key))
        if raw is not None:
            return self._decode(key, raw)
        value = await resolve_value(value)
        await self.set(key, value, ttl)
        return value

    async def get_or_set_func(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> Any | None:
        """Return the cached value of *key*, storing the result of *producer* on a miss.

        A ``None`` result from *producer* is returned without being stored.
        """
        raw = await self._client.get(self._key(key))
        if raw is not None:
            return self._decode(key, raw)
        value = await Deferred(producer).resolve()
        if value is None:
            return None
        await self.set(key, value, ttl)
        return value

    async def get_or_set_func_lock(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> Any | None:
        """Same as :meth:`get_or_set_func`; no lock is taken here."""
        return await self.get_or_set_func(key, producer, ttl)

    async def contains(self, key: Any) -> bool:
        count = await self._client.exists(self._key(key))
        return cast(bool, count > 0)

    async def remove(self, *keys: Any) -> Any | None:
        """Delete *keys* and return the value the last of them held."""
        if not keys:
            return None
        names = [self._key(k) for k in keys]
        raw = await self._client.get(names[-1])
        await self._client.delete(*names)
        return self._decode(keys[-1], raw)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    async def sets(self, data: Mapping[Any, Any], ttl: timedelta | None = None) -> None:
        """Store every pair of *data* with the same expiration.

        A negative *ttl* deletes all keys in one call and a zero *ttl*
        writes them in one ``MSET``. Redis has no batched write with
        expiry, so a positive *ttl* costs one round trip per entry.
        """
        if not data:
            return
        ttl = self._ttl(ttl)

        if ttl < _ZERO:
            await self._client.delete(*(self._key(k) for k in data))
        elif ttl == _ZERO:
            mapping = {self._key(k): self._encode(k, v) for k, v in data.items() if v is not None}
            absent = [self._key(k) for k, v in data.items() if v is None]
            if mapping:
                await self._client.mset(mapping)
            if absent:
                await self._client.delete(*absent)
        else:
            for k, v in data.items():
                await self.set(k, v, ttl)

    async def _names(self) -> list[bytes | str]:
        return list(await self._client.keys(self._pattern()))

    async def data(self) -> dict[str, Any]:
        """Return every key-value pair, in the store's enumeration order."""
        names = await self._names()
        if not names:
            return {}
        raws = await self._client.mget(names)
        result: dict[str, Any] = {}
        for name, raw in zip(names, raws):
            key = self._strip(name)
            result[key] = self._decode(key, raw)
        return result

    async def keys(self) -> list[str]:
        return [self._strip(name) for name in await self._names()]

    async def values(self) -> list[Any]:
        names = await self._names()
        if not names:
            return []
        raws = await self._client.mget(names)
        return [self._decode(self._strip(name), raw) for name, raw in zip(names, raws)]

    async def size(self) -> int:
        """Number of keys; the whole database unless a namespace is set."""
        if self._namespace:
            return len(await self._names())
        return cast(int, await self._client.dbsize())

    async def clear(self) -> None:
        """Delete every key.

        Without a namespace this flushes the whole database, falling back
        to deleting the enumerated keys when the server refuses ``FLUSHDB``.
        """
        if not self._namespace:
            try:
                await self._client.flushdb()
                return
            except ResponseError:
                _logger.warning("FLUSHDB rejected by server, deleting keys instead")

        names = await self._names()
        if names:
            await self._client.delete(*names)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Validate connectivity by pinging Redis."""
        await self._client.ping()

    async def stop(self) -> None:
        await self.close()

    async def close(self) -> None:
        """Does nothing: the client belongs to whoever created it."""
