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
"""Builds the cache adapter from configuration."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from flycache.cache.adapters.redis import RedisCacheAdapter
from flycache.config.properties.cache import CacheProperties
from flycache.core.config import Config
from flycache.kernel.exceptions import ConfigurationException

_logger = logging.getLogger(__name__)

_DEFAULT_URL = "redis://localhost:6379/0"


def create_cache_adapter(config: Config, client: Any | None = None) -> RedisCacheAdapter:
    """Create a :class:`RedisCacheAdapter` from ``flycache.cache.*``.

    When *client* is given it is used as-is; otherwise a ``redis.asyncio``
    client is created from ``flycache.cache.redis.url``. Either way the
    caller owns the client and is responsible for closing it.
    """
    props = config.bind(CacheProperties)

    if props.provider != "redis":
        raise ConfigurationException(
            f"Unsupported cache provider '{props.provider}'",
            code="CACHE_PROVIDER",
            context={"provider": props.provider},
        )
    if props.ttl < 0:
        raise ConfigurationException(
            f"Default cache ttl must not be negative, got {props.ttl}",
            code="CACHE_TTL",
            context={"ttl": props.ttl},
        )

    if client is None:
        import redis.asyncio as aioredis

        url = str(config.get("flycache.cache.redis.url", props.redis.get("url", _DEFAULT_URL)))
        client = aioredis.from_url(url)
        _logger.info("Cache adapter connecting to %s", url)

    return RedisCacheAdapter(
        client=client,
        namespace=props.namespace,
        default_ttl=timedelta(seconds=props.ttl),
    )
