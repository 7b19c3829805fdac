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
"""Lifecycle protocol for cache backends.

Whoever wires the process calls start() once before serving traffic and
stop() during shutdown.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Lifecycle(Protocol):
    """Standard lifecycle for cache backends."""

    async def start(self) -> None:
        """Validate connectivity to the backing store.

        Raise if the store cannot be reached so that startup fails fast.
        """
        ...

    async def stop(self) -> None:
        """Release whatever the backend owns.

        Backends that borrow a shared client must leave it open.
        """
        ...
