from typing import Any, Optional, Protocol

import orjson
import redis

from ..config import settings


class RecordStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class RedisStore:
    """Key/value store holding JSON documents in plain Redis strings."""

    def __init__(self, client: redis.Redis | None = None):
        self.r = client or redis.from_url(settings.redis_url)

    def get(self, key: str) -> Optional[Any]:
        raw = self.r.get(key)
        if raw is None:
            return None
        return orjson.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.r.set(key, orjson.dumps(value))

    def delete(self, key: str) -> None:
        self.r.delete(key)
