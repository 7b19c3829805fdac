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
"""Tests for @config_properties dataclass binding per subsystem."""

from flycache.config.properties import CacheProperties, LoggingProperties
from flycache.core.config import Config


class TestCacheProperties:
    def test_bind_defaults(self):
        props = Config({"flycache": {"cache": {}}}).bind(CacheProperties)
        assert props.provider == "redis"
        assert props.redis == {"url": "redis://localhost:6379/0"}
        assert props.namespace == ""
        assert props.ttl == 0

    def test_bind_custom_values(self):
        config = Config(
            {"flycache": {"cache": {"namespace": "orders:", "ttl": 600, "redis": {"url": "redis://r:6379/1"}}}}
        )
        props = config.bind(CacheProperties)
        assert props.namespace == "orders:"
        assert props.ttl == 600
        assert props.redis["url"] == "redis://r:6379/1"

    def test_env_var_coerced_to_int(self, monkeypatch):
        monkeypatch.setenv("FLYCACHE_CACHE_TTL", "45")
        props = Config({}).bind(CacheProperties)
        assert props.ttl == 45


class TestLoggingProperties:
    def test_bind_defaults(self):
        props = Config({}).bind(LoggingProperties)
        assert props.level == {"root": "INFO"}
        assert props.format == "console"

    def test_bind_custom_values(self):
        config = Config({"flycache": {"logging": {"format": "json", "level": {"root": "DEBUG"}}}})
        props = config.bind(LoggingProperties)
        assert props.format == "json"
        assert props.level == {"root": "DEBUG"}
