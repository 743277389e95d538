#!/usr/bin/env python3
import os
import json
import time
from typing import Any, Dict, Optional, Tuple

import redis


class _InMemorySWR:
    def __init__(self):
        # se guarda el JSON serializado: cada lectura entrega una copia nueva
        self._store: Dict[str, Tuple[float, float, str]] = {}

    def get_swr(self, key: str) -> Tuple[Optional[Any], bool, bool]:
        now = time.time()
        if key not in self._store:
            return None, False, False
        exp, swr_until, raw = self._store[key]
        fresh = now < exp
        swr_ok = now < swr_until
        return json.loads(raw), fresh, swr_ok

    def set_swr(self, key: str, value: Any, ttl_seconds: int = 30, swr_seconds: int = 0) -> None:
        now = time.time()
        self._store[key] = (now + ttl_seconds, now + ttl_seconds + swr_seconds, json.dumps(value, ensure_ascii=False))

    def clear(self) -> None:
        self._store.clear()


class _RedisSWR:
    def __init__(self, url: str, prefix: str = "match:"):
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.prefix = prefix

    def get_swr(self, key: str) -> Tuple[Optional[Any], bool, bool]:
        raw = self.client.get(self.prefix + key)
        if raw is None:
            return None, False, False
        try:
            data = json.loads(raw)
        except ValueError:
            return None, False, False
        value = data.get("value")
        exp = float(data.get("exp", 0))
        swr_until = float(data.get("swr", 0))
        now = time.time()
        fresh = now < exp
        swr_ok = now < swr_until
        return value, fresh, swr_ok

    def set_swr(self, key: str, value: Any, ttl_seconds: int = 30, swr_seconds: int = 0) -> None:
        now = time.time()
        payload = {
            "value": value,
            "exp": now + ttl_seconds,
            "swr": now + ttl_seconds + swr_seconds,
        }
        # expiración real en exp+swr
        ex = max(1, int(ttl_seconds + swr_seconds))
        self.client.set(self.prefix + key, json.dumps(payload, ensure_ascii=False), ex=ex)

    def clear(self) -> None:
        for key in self.client.scan_iter(match=self.prefix + "*"):
            self.client.delete(key)


class RedisCacheFacade:
    def __init__(self, url: Optional[str] = None):
        url = url if url is not None else (os.getenv("REDIS_URL") or "")
        if url:
            self.backend = _RedisSWR(url)
        else:
            self.backend = _InMemorySWR()

    def get_swr(self, key: str):
        return self.backend.get_swr(key)

    def get_fresh(self, key: str) -> Optional[Any]:
        value, fresh, _ = self.backend.get_swr(key)
        return value if fresh else None

    def set_swr(self, key: str, value: Any, ttl_seconds: int = 30, swr_seconds: int = 0) -> None:
        self.backend.set_swr(key, value, ttl_seconds=ttl_seconds, swr_seconds=swr_seconds)

    def clear(self) -> None:
        self.backend.clear()


redis_cache = RedisCacheFacade()
