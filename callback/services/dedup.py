"""
短时间窗口内的去重缓存。

三个缓存（入站内容 / 回复消息 / 出站请求）共用一个清理时钟：
每个 TTL 周期最多清理一次，清理时所有缓存一起剔除过期条目。
多进程部署可切换到 Redis（SET NX PX），过期交给 Redis 处理。
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from typing import Callable

from django.conf import settings
from django_redis import get_redis_connection

logger = logging.getLogger(__name__)

REQUEST_CONTENT = "request_content"
RESPONSE_MSG = "response_msg"
OUTBOUND_REQUEST = "outbound_request"
CACHE_NAMES = (REQUEST_CONTENT, RESPONSE_MSG, OUTBOUND_REQUEST)

REDIS_KEY_PREFIX = "msg_callback:dedup"


def sha256_hex(text: str | None) -> str | None:
    if text is None:
        return None
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _is_blank(key) -> bool:
    return key is None or not str(key).strip()


class DedupCache:
    """进程内去重缓存：key -> 首次出现时间（秒）。"""

    def __init__(self, name: str, ttl_seconds: float, group: "DedupGroup | None" = None):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._group = group
        self._entries: dict[str, float] = {}
        self._lock = threading.Lock()

    def is_duplicate(self, key: str | None, now: float | None = None) -> bool:
        if _is_blank(key) or self.ttl_seconds <= 0:
            return False
        if now is None:
            now = self._group.clock() if self._group else time.monotonic()
        if self._group is not None:
            self._group.maybe_cleanup(now)

        with self._lock:
            seen_at = self._entries.get(key)
            if seen_at is not None and now - seen_at < self.ttl_seconds:
                # 命中时保留首次时间，窗口不因重复请求而顺延
                return True
            self._entries[key] = now
            return False

    def cleanup(self, now: float) -> int:
        with self._lock:
            expired = [key for key, seen_at in self._entries.items() if now - seen_at >= self.ttl_seconds]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisDedupCache:
    """基于 Redis 的去重缓存，适合多 worker / 多实例部署。"""

    def __init__(self, name: str, ttl_seconds: float, prefix: str = REDIS_KEY_PREFIX):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    def _redis_key(self, key: str) -> str:
        return f"{self.prefix}:{self.name}:{key}"

    def is_duplicate(self, key: str | None, now: float | None = None) -> bool:
        if _is_blank(key) or self.ttl_seconds <= 0:
            return False
        ttl_ms = max(1, int(self.ttl_seconds * 1000))
        try:
            conn = get_redis_connection("default")
            acquired = conn.set(self._redis_key(key), "1", nx=True, px=ttl_ms)
        except Exception:
            # Redis 不可用时放行，宁可重复也不丢消息
            logger.warning("[MSG] Redis 去重失败，按非重复处理 cache=%s", self.name, exc_info=True)
            return False
        return not acquired

    def cleanup(self, now: float) -> int:
        return 0

    def clear(self) -> None:
        return None


class DedupGroup:
    """一组共享清理时钟的去重缓存。"""

    def __init__(
        self,
        ttl_seconds: float,
        backend: str = "memory",
        clock: Callable[[], float] = time.monotonic,
        names=CACHE_NAMES,
    ):
        self.ttl_seconds = ttl_seconds
        self.backend = backend
        self.clock = clock
        self._last_cleanup: float | None = None
        self._cleanup_lock = threading.Lock()
        if backend == "redis":
            self._caches = {name: RedisDedupCache(name, ttl_seconds) for name in names}
        elif backend == "memory":
            self._caches = {name: DedupCache(name, ttl_seconds, group=self) for name in names}
        else:
            raise ValueError(f"unknown dedup backend: {backend}")

    def cache(self, name: str):
        return self._caches[name]

    def maybe_cleanup(self, now: float) -> bool:
        """距上次清理不足一个 TTL 时跳过；只有抢到本轮清理的调用方真正执行。"""
        with self._cleanup_lock:
            if self._last_cleanup is not None and now - self._last_cleanup < self.ttl_seconds:
                return False
            self._last_cleanup = now
        removed = sum(cache.cleanup(now) for cache in self._caches.values())
        if removed:
            logger.debug("[MSG] 去重缓存清理 removed=%s", removed)
        return True

    def clear(self) -> None:
        for cache in self._caches.values():
            cache.clear()
        self._last_cleanup = None


_group: DedupGroup | None = None
_group_lock = threading.Lock()


def get_dedup_group() -> DedupGroup:
    global _group
    with _group_lock:
        if _group is None:
            config = settings.MSG_CALLBACK
            _group = DedupGroup(
                ttl_seconds=float(config.get("DEDUP_TTL_SECONDS", 5.0)),
                backend=config.get("DEDUP_BACKEND", "memory"),
            )
        return _group


def get_cache(name: str):
    return get_dedup_group().cache(name)


def reset_dedup_group() -> None:
    """配置变更（测试里 override_settings）后重新构建。"""
    global _group
    with _group_lock:
        _group = None
