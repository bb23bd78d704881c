"""Services package - database, cache and configuration services."""
from functools import lru_cache

from .database import DatabaseService
from .redis_cache import RedisCache, CacheKeys, get_redis_cache
from .config_store import ConfigStore


@lru_cache
def get_database_service() -> DatabaseService:
    """Get cached DatabaseService instance."""
    return DatabaseService()


def get_config_store() -> ConfigStore:
    return ConfigStore(get_database_service(), get_redis_cache())


__all__ = [
    "DatabaseService",
    "get_database_service",
    "RedisCache",
    "CacheKeys",
    "get_redis_cache",
    "ConfigStore",
    "get_config_store",
]
