"""Redis account store implementation."""

from typing import Optional

from socialchain.exceptions import StoreError
from socialchain.models.account import AccountState
from socialchain.models.address import Address
from socialchain.store.base import AccountStore

try:
    import redis.asyncio as redis
    REDIS_AVAILABLE = True
except ImportError:
    REDIS_AVAILABLE = False


class RedisAccountStore(AccountStore):
    """
    Redis-based account store.

    Each account is a hash with owner, lamports and data fields.
    Requires redis package: pip install redis

    Example:
        store = RedisAccountStore("redis://localhost:6379/0")
        async with store:
            await store.put(state)
            loaded = await store.get(state.address)
    """

    def __init__(self, redis_url: str = "redis://localhost:6379/0"):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
        """
        if not REDIS_AVAILABLE:
            raise ImportError(
                "Redis package not installed. Install with: pip install redis"
            )

        self.redis_url = redis_url
        self._client: Optional[redis.Redis] = None
        self._key_prefix = "socialchain:account:"

    async def _ensure_client(self) -> "redis.Redis":
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(self.redis_url)
        return self._client

    def _make_key(self, address: Address) -> str:
        """Create Redis key for an account."""
        return f"{self._key_prefix}{address}"

    async def get(self, address: Address) -> AccountState | None:
        """Retrieve stored account."""
        client = await self._ensure_client()
        fields = await client.hgetall(self._make_key(address))

        if not fields:
            return None

        return AccountState(
            address=address,
            owner=fields[b"owner"].decode("ascii"),
            lamports=int(fields[b"lamports"]),
            data=fields[b"data"],
        )

    async def put_many(self, states: list[AccountState]) -> None:
        """Store accounts in one MULTI/EXEC transaction."""
        client = await self._ensure_client()

        pipe = client.pipeline(transaction=True)
        for state in states:
            pipe.hset(
                self._make_key(state.address),
                mapping={
                    "owner": str(state.owner),
                    "lamports": state.lamports,
                    "data": state.data,
                },
            )
        try:
            await pipe.execute()
        except redis.RedisError as e:
            raise StoreError(f"Failed to write {len(states)} accounts: {e}") from e

    async def delete(self, address: Address) -> None:
        """Remove one account."""
        client = await self._ensure_client()
        await client.delete(self._make_key(address))

    async def clear(self) -> None:
        """Remove all socialchain accounts."""
        client = await self._ensure_client()

        cursor = 0
        while True:
            cursor, keys = await client.scan(cursor, match=f"{self._key_prefix}*")
            if keys:
                await client.delete(*keys)
            if cursor == 0:
                break

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        """Check if Redis is available."""
        try:
            client = await self._ensure_client()
            return await client.ping()
        except redis.RedisError:
            return False
