"""Redis backend for session documents."""

from pydantic import ConfigDict
from redis.asyncio import Redis

from chatbot_state.backends.base import StateConfig


class RedisConfig(StateConfig):
    """Connection settings for the Redis backend.

    ``url`` (``redis://`` or ``rediss://``) wins over the individual fields
    when both are given.
    """

    url: str | None = None
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None
    ssl: bool = False
    max_connections: int = 10

    model_config = ConfigDict(frozen=True)

    def create_client(self) -> Redis:
        """Build a client with its own pool; no connection is opened yet."""
        if self.url:
            return Redis.from_url(
                self.url,
                max_connections=self.max_connections,
                decode_responses=True,
            )
        return Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            password=self.password,
            ssl=self.ssl,
            max_connections=self.max_connections,
            decode_responses=True,
        )


class RedisBackend:
    """Redis implementation of the StateBackend protocol.

    The client is created on first use, so building the app never needs a
    reachable server. Expiry uses SETEX; key listing walks the keyspace with
    SCAN instead of the blocking KEYS command.
    """

    def __init__(self, config: RedisConfig):
        self.config = config
        self._redis: Redis | None = None

    @property
    def client(self) -> Redis:
        if self._redis is None:
            self._redis = self.config.create_client()
        return self._redis

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl is None:
            await self.client.set(key, value)
        else:
            await self.client.setex(key, ttl, value)

    async def delete(self, key: str) -> bool:
        return bool(await self.client.delete(key))

    async def exists(self, key: str) -> bool:
        return bool(await self.client.exists(key))

    async def keys(self, pattern: str = "*") -> list[str]:
        return [key async for key in self.client.scan_iter(match=pattern)]

    async def close(self) -> None:
        """Release the client's pooled connections."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
