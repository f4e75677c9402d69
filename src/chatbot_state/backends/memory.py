"""In-process backend for development and tests."""

import fnmatch
import time


class MemoryBackend:
    """Dictionary implementation of the StateBackend protocol.

    Values live only as long as the process. Expired keys are dropped
    lazily when they are next touched.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float | None]] = {}

    def _live(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            del self._data[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        return self._live(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl is not None else None
        self._data[key] = (value, expires_at)

    async def delete(self, key: str) -> bool:
        if self._live(key) is None:
            return False
        del self._data[key]
        return True

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def keys(self, pattern: str = "*") -> list[str]:
        return [
            key
            for key in list(self._data)
            if fnmatch.fnmatchcase(key, pattern) and self._live(key) is not None
        ]

    async def close(self) -> None:
        self._data.clear()
