# src/family_weather/client/query_cache.py
from __future__ import annotations
import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple


class QueryCache:
    """
    키 단위 TTL 캐시 + 진행 중 요청 공유.
    같은 키로 동시에 들어온 요청은 하나의 task 를 기다린다. 실패 결과는 캐시하지 않는다.
    """

    def __init__(self, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time_func = time_func
        self._storage: Dict[Hashable, Tuple[float, Any]] = {}
        self._inflight: Dict[Hashable, asyncio.Task] = {}

    def get(self, key: Hashable) -> Any:
        item = self._storage.get(key)
        if not item:
            return None
        expires_at, value = item
        if expires_at < self._time_func():
            self._storage.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        self._storage[key] = (self._time_func() + ttl, value)

    async def fetch(self, key: Hashable, factory: Callable[[], Awaitable[Any]], ttl: float) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._settle(key, done, ttl))
        # 한 호출자가 취소돼도 공유 task 는 계속 진행
        return await asyncio.shield(task)

    def _settle(self, key: Hashable, task: asyncio.Task, ttl: float) -> None:
        if self._inflight.get(key) is task:
            self._inflight.pop(key, None)
        if not task.cancelled() and task.exception() is None:
            self.set(key, task.result(), ttl)
