# -*- coding: utf-8 -*-
"""
관할 지역 판별 (특별시/광역시는 시/도, 도 지역은 시/군)
- 좌표 역지오코딩 결과를 좌표 키("lat,lng")별로 캐시 (append-only)
- 같은 좌표에 대한 동시 요청은 하나의 외부 호출을 공유
- resolve_many: asyncio.Semaphore로 외부 동시 요청 수 제한
- 역지오코딩 실패는 "" (미확인 지역)으로 처리, 파이프라인을 중단시키지 않는다
- 주소 문자열에서 네트워크 없이 같은 단위의 지역을 추출하는 대체 전략 제공
- 출발지(사용자 위치)는 resolve_origin으로 조회하며 캐시에 남기지 않는다
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional

from src.geocoding import region_label
from src.models import Coordinate, Station

logger = logging.getLogger(__name__)

GeocodeFn = Callable[[float, float], Awaitable[dict]]

PROVINCE_SUFFIXES = ("특별자치시", "특별자치도", "특별시", "광역시", "도")
CITY_SUFFIXES = ("시", "군")

# 주소 약칭 → 역지오코딩 결과(region_1depth_name)와 같은 표기
REGION_ALIASES = {
    "서울": "서울특별시",
    "부산": "부산광역시",
    "대구": "대구광역시",
    "인천": "인천광역시",
    "광주": "광주광역시",
    "대전": "대전광역시",
    "울산": "울산광역시",
    "세종": "세종특별자치시",
    "경기": "경기도",
    "강원": "강원특별자치도",
    "강원도": "강원특별자치도",
    "충북": "충청북도",
    "충남": "충청남도",
    "전북": "전북특별자치도",
    "전라북도": "전북특별자치도",
    "전남": "전라남도",
    "경북": "경상북도",
    "경남": "경상남도",
    "제주": "제주특별자치도",
    "제주도": "제주특별자치도",
}

STRATEGIES = ("geocode", "address")


def region_from_address(address: Optional[str]) -> str:
    """주소에서 관할 지역을 추출한다.

    시/도 토큰 뒤에 시/군 토큰이 오면 region_label과 같은 규칙으로 고르고,
    시/도 없이 시/군 토큰만 있으면 그 토큰, 둘 다 없으면 첫 토큰.
    """
    if not address:
        return ""
    tokens = address.split()
    if not tokens:
        return ""
    for idx, token in enumerate(tokens):
        if token in REGION_ALIASES or token.endswith(PROVINCE_SUFFIXES):
            nxt = tokens[idx + 1] if idx + 1 < len(tokens) else ""
            return region_label({
                "region": REGION_ALIASES.get(token, token),
                "city": nxt if nxt.endswith(CITY_SUFFIXES) else "",
            })
        if token.endswith(CITY_SUFFIXES):
            return token
    return tokens[0]


class RegionCache:
    """좌표 키 → 지역명. 키는 삭제되지 않고 기존 값도 덮어쓰지 않는다."""

    def __init__(self) -> None:
        self._labels: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._labels.get(key)

    def put(self, key: str, label: str) -> str:
        return self._labels.setdefault(key, label)

    def __contains__(self, key: str) -> bool:
        return key in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._labels)


class CancelToken:
    """소비자 세션 수명. cancel() 이후 완료된 조회는 캐시에 기록되지 않는다."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class RegionResolver:

    def __init__(self, geocode: GeocodeFn, cache: Optional[RegionCache] = None,
                 strategy: str = "geocode", concurrency: int = 4) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown region strategy: {strategy}")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._geocode = geocode
        self.cache = cache if cache is not None else RegionCache()
        self.strategy = strategy
        self.concurrency = concurrency
        self._inflight: Dict[str, asyncio.Task] = {}

    async def _lookup(self, coord: Coordinate) -> str:
        try:
            result = await self._geocode(coord.lat, coord.lng)
        except Exception as e:
            logger.warning("Reverse geocode failed for %s: %s", coord.key, e)
            return ""
        return region_label(result)

    def _inflight_task(self, coord: Coordinate) -> asyncio.Task:
        key = coord.key
        loop = asyncio.get_running_loop()
        task = self._inflight.get(key)
        if task is None or task.cancelled() or (not task.done() and task.get_loop() is not loop):
            task = loop.create_task(self._lookup(coord))
            self._inflight[key] = task
        return task

    async def resolve(self, coord: Coordinate, token: Optional[CancelToken] = None) -> str:
        """좌표의 지역명. 캐시 미스 시 역지오코딩 후 캐시에 저장한다."""
        cached = self.cache.get(coord.key)
        if cached is not None:
            return cached

        # 완료된 조회는 캐시에 기록될 때까지 in-flight에 남겨 재요청을 막는다
        task = self._inflight_task(coord)
        if task.done():
            label = task.result()
        else:
            # 대기자 하나가 취소돼도 공유 조회는 계속 진행
            label = await asyncio.shield(task)
        if token is not None and token.cancelled:
            logger.debug("Discarding stale region result for %s", coord.key)
            return ""
        label = self.cache.put(coord.key, label)
        self._inflight.pop(coord.key, None)
        return label

    async def resolve_origin(self, coord: Coordinate) -> str:
        """사용자 위치의 지역명. 좌표가 매번 달라지므로 캐시에 기록하지 않는다."""
        return await self._lookup(coord)

    def resolve_address(self, station: Station) -> str:
        return region_from_address(station.station_address)

    async def resolve_many(self, coords: Iterable[Coordinate],
                           token: Optional[CancelToken] = None,
                           concurrency: Optional[int] = None) -> Dict[str, str]:
        """여러 좌표를 제한된 동시성으로 조회한다. {좌표 키: 지역명}"""
        unique: Dict[str, Coordinate] = {}
        for coord in coords:
            unique.setdefault(coord.key, coord)

        semaphore = asyncio.Semaphore(concurrency or self.concurrency)

        async def _one(coord: Coordinate) -> str:
            async with semaphore:
                return await self.resolve(coord, token)

        labels = await asyncio.gather(*(_one(c) for c in unique.values()))
        return dict(zip(unique.keys(), labels))

    async def resolve_stations(self, stations: Iterable[Station],
                               token: Optional[CancelToken] = None) -> Dict[str, str]:
        """역별 도착 지역. {station.id: 지역명}

        address 전략: 주소에서 추출, 주소가 없거나 토큰이 없으면 좌표 조회로 대체.
        """
        stations = list(stations)
        regions: Dict[str, str] = {}
        pending = []
        for station in stations:
            if self.strategy == "address":
                label = self.resolve_address(station)
                if label:
                    regions[station.id] = label
                    continue
            pending.append(station)

        if pending:
            by_coord = await self.resolve_many((s.coordinate for s in pending), token)
            for station in pending:
                regions[station.id] = by_coord.get(station.coordinate.key, "")
        return regions
