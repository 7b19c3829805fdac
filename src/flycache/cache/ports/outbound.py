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
"""Cache adapter protocol."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

from flycache.cache.types import Expiry


@runtime_checkable
class CacheAdapter(Protocol):
    """Storage contract a generic cache delegates to.

    Durations follow one rule everywhere: positive expires after that long,
    zero never expires, negative deletes the key. Absence is reported as
    ``None`` (or ``False``), never as an exception.
    """

    async def set(self, key: Any, value: Any, ttl: timedelta | None = None) -> None: ...

    async def get(self, key: Any) -> Any | None: ...

    async def update(self, key: Any, value: Any) -> tuple[Any | None, bool]: ...

    async def update_expire(self, key: Any, ttl: timedelta) -> Expiry: ...

    async def get_expire(self, key: Any) -> timedelta: ...

    async def get_expiry(self, key: Any) -> Expiry: ...

    async def set_if_not_exist(self, key: Any, value: Any, ttl: timedelta | None = None) -> bool: ...

    async def set_if_not_exist_with_producer(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> bool: ...

    async def set_if_not_exist_with_producer_lock(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> bool: ...

    async def get_or_set(self, key: Any, value: Any, ttl: timedelta | None = None) -> Any | None: ...

    async def get_or_set_func(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> Any | None: ...

    async def get_or_set_func_lock(
        self, key: Any, producer: Callable[[], Any], ttl: timedelta | None = None
    ) -> Any | None: ...

    async def sets(self, data: Mapping[Any, Any], ttl: timedelta | None = None) -> None: ...

    async def contains(self, key: Any) -> bool: ...

    async def remove(self, *keys: Any) -> Any | None: ...

    async def data(self) -> dict[str, Any]: ...

    async def keys(self) -> list[str]: ...

    async def values(self) -> list[Any]: ...

    async def size(self) -> int: ...

    async def clear(self) -> None: ...

    async def close(self) -> None: ...
