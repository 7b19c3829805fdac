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
"""Exception hierarchy for flycache.

Errors reported by the Redis client itself (``redis.exceptions.RedisError``)
are never wrapped: they reach the caller exactly as the client raised them.
The classes below cover failures that originate on the adapter side.

Categories:
- ConfigurationException: invalid or unsupported settings
- InfrastructureException: failures preparing data for the remote store
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class FlyCacheException(Exception):
    """Base exception for all flycache errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_SERIALIZATION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(FlyCacheException):
    """Settings are missing, malformed, or name an unsupported option."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(FlyCacheException):
    """Failures on the path between the adapter and the remote store."""


class SerializationException(InfrastructureException):
    """A value could not be encoded for storage."""
