from __future__ import annotations

from typing import Iterator, List, Optional

import redis

from ..core.types import Asset

DEFAULT_PREFIX = "envchain:assets:"


class RedisAssetRegistry:
    """Configuration assets stored as raw bytes under ``<prefix><module>/<path>`` keys."""

    def __init__(self, uri: str, prefix: str = DEFAULT_PREFIX, name: Optional[str] = None):
        self.uri = uri
        self.client = redis.Redis.from_url(uri)
        self.name = name or f"redis:{uri}"
        self.prefix = prefix

    def _prefixed(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def _keys(self) -> List[str]:
        keys = [
            k.decode("utf-8") if isinstance(k, bytes) else k
            for k in self.client.keys(self._prefixed("*"))
        ]
        return sorted(keys)

    @property
    def modules(self) -> List[str]:
        seen: List[str] = []
        for key in self._keys():
            module = self._unprefixed(key).split("/", 1)[0]
            if module not in seen:
                seen.append(module)
        return seen

    def __iter__(self) -> Iterator[Asset]:
        keys = self._keys()
        if not keys:
            return
        values = self.client.mget(keys)
        for key, value in zip(keys, values):
            if value is None:
                continue
            module, _, path = self._unprefixed(key).partition("/")
            if not path:
                continue
            content = value if isinstance(value, bytes) else str(value).encode("utf-8")
            yield Asset(path=path, module=module, content=content)

    def put(self, module: str, path: str, content: bytes) -> None:
        self.client.set(self._prefixed(f"{module}/{path}"), content)
