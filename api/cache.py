# -*- coding: utf-8 -*-
"""
요청 단위 캐시
- budget_cache: (lat, lng, budget, origin_region) → 예산 필터 결과.
  검색어는 키에 없으므로 검색어만 바뀐 요청은 이름 필터만 다시 돈다.
- origin_cache: 사용자 위치 좌표 → 출발 지역. 역 좌표 캐시와 달리 크기 제한.
- 데이터 리로드 시 budget_cache만 비운다 (출발 지역은 데이터와 무관)
"""
import threading
import time
from collections import OrderedDict
from typing import Any, Hashable, Optional


class TTLCache:
    """크기 제한 + 만료 시간이 있는 LRU (thread-safe)"""

    def __init__(self, max_size: int = 100, ttl_seconds: int = 300):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.cache: "OrderedDict[Hashable, tuple[float, Any]]" = OrderedDict()
        self._lock = threading.RLock()

    def _evict(self, now: float) -> None:
        stale = [k for k, (ts, _) in self.cache.items() if now - ts > self.ttl_seconds]
        for k in stale:
            del self.cache[k]
        while len(self.cache) > self.max_size:
            self.cache.popitem(last=False)

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            self._evict(time.time())
            entry = self.cache.get(key)
            if entry is None:
                return None
            self.cache.move_to_end(key)
            return entry[1]

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            now = time.time()
            self.cache[key] = (now, value)
            self.cache.move_to_end(key)
            self._evict(now)

    def __len__(self) -> int:
        return len(self.cache)

    def invalidate(self) -> None:
        with self._lock:
            self.cache.clear()


budget_cache = TTLCache(max_size=100, ttl_seconds=300)
origin_cache = TTLCache(max_size=1000, ttl_seconds=3600)


def invalidate_budget_cache():
    budget_cache.invalidate()
