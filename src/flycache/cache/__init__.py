"""flycache — Redis backend for generic cache abstractions."""

from flycache.cache.adapters.redis import RedisCacheAdapter
from flycache.cache.factory import create_cache_adapter
from flycache.cache.ports.outbound import CacheAdapter
from flycache.cache.types import Deferred, Expiry, ExpiryKind

__all__ = [
    "CacheAdapter",
    "Deferred",
    "Expiry",
    "ExpiryKind",
    "RedisCacheAdapter",
    "create_cache_adapter",
]
