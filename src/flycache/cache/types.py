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
"""Value and expiry types shared by cache adapters."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

# Redis TTL replies.
TTL_NO_EXPIRY = -1
TTL_MISSING = -2


@dataclass(frozen=True)
class Deferred:
    """A value computed on demand by a zero-argument producer.

    The producer may be a plain function or a coroutine function. It is
    called at most once per operation, and only when the operation needs
    the value.
    """

    producer: Callable[[], Any]

    async def resolve(self) -> Any:
        result = self.producer()
        if inspect.isawaitable(result):
            result = await result
        return result


async def resolve_value(value: Any) -> Any:
    """Return *value*, running it first if it is a :class:`Deferred`."""
    if isinstance(value, Deferred):
        return await value.resolve()
    return value


class ExpiryKind(Enum):
    NOT_FOUND = "not_found"
    NEVER_EXPIRES = "never_expires"
    EXPIRES_IN = "expires_in"


@dataclass(frozen=True)
class Expiry:
    """Expiration state of a key.

    Keeps "key does not exist" apart from "key never expires", which the
    plain duration form (:meth:`to_timedelta`) can only tell apart by
    convention.
    """

    kind: ExpiryKind
    remaining: timedelta | None = None

    @classmethod
    def not_found(cls) -> Expiry:
        return cls(ExpiryKind.NOT_FOUND)

    @classmethod
    def never(cls) -> Expiry:
        return cls(ExpiryKind.NEVER_EXPIRES)

    @classmethod
    def expires_in(cls, remaining: timedelta) -> Expiry:
        return cls(ExpiryKind.EXPIRES_IN, remaining)

    @classmethod
    def from_ttl(cls, ttl: int) -> Expiry:
        """Translate a Redis ``TTL`` reply."""
        if ttl == TTL_MISSING:
            return cls.not_found()
        if ttl == TTL_NO_EXPIRY:
            return cls.never()
        return cls.expires_in(timedelta(seconds=ttl))

    @property
    def exists(self) -> bool:
        return self.kind is not ExpiryKind.NOT_FOUND

    def to_timedelta(self) -> timedelta:
        """Duration form: ``-1s`` if missing, ``0`` if it never expires, else the time left."""
        if self.kind is ExpiryKind.NOT_FOUND:
            return timedelta(seconds=-1)
        if self.kind is ExpiryKind.NEVER_EXPIRES:
            return timedelta(0)
        assert self.remaining is not None
        return self.remaining
