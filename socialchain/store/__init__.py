"""Account store implementations."""

from socialchain.store.base import AccountStore
from socialchain.store.memory_store import MemoryAccountStore
from socialchain.store.sqlite_store import SQLiteAccountStore
from socialchain.store.redis_store import RedisAccountStore

__all__ = ["AccountStore", "MemoryAccountStore", "SQLiteAccountStore", "RedisAccountStore"]
