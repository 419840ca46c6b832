# -*- coding: utf-8 -*-
"""
예산 내 추천 역 파이프라인
==========================
1단계 (예산 필터): 현재 위치 → 역 거리, 도착 지역, 시외할증, 예상요금 계산 후
                  fare <= budget 인 역만 남기고 요금 오름차순 정렬
                  (동률은 카탈로그 순서 유지, stable sort)
2단계 (검색 필터): 역 이름 대소문자 무시 부분 일치. 검색어가 비면 그대로 통과.

위치 또는 출발 지역이 없으면(None) 빈 결과를 반환한다.
출발 지역 ""은 '미확인'으로 보고 할증 없이 계산한다.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence

from src.distance import distances_km
from src.fare import SEOUL_2024, FareSchedule, estimate_fare, is_out_of_city
from src.models import Coordinate, Recommendation, Station
from src.region import CancelToken, RegionResolver

logger = logging.getLogger(__name__)


def filter_by_name(results: Sequence[Recommendation], search_text: Optional[str]) -> List[Recommendation]:
    if not search_text:
        return list(results)
    needle = search_text.lower()
    return [r for r in results if needle in r.station.name.lower()]


class RecommendationPipeline:

    def __init__(self, resolver: RegionResolver, schedule: FareSchedule = SEOUL_2024):
        self.resolver = resolver
        self.schedule = schedule

    def rank(self, current_location: Optional[Coordinate], stations: Sequence[Station],
             budget: float, origin_region: Optional[str],
             dest_regions: Dict[str, str]) -> List[Recommendation]:
        """예산 필터 + 정렬 (동기). dest_regions: {station.id: 지역명}"""
        if current_location is None or origin_region is None or not stations:
            return []
        if budget is None or not math.isfinite(budget):
            return []

        distances = distances_km(current_location, [s.coordinate for s in stations])
        results = []
        for station, dist in zip(stations, distances):
            dist = float(dist)
            dest_region = dest_regions.get(station.id, "")
            out_of_city = is_out_of_city(origin_region, dest_region)
            try:
                fare = estimate_fare(dist, out_of_city, self.schedule)
            except ValueError:
                logger.debug("Station %s dropped: non-finite distance", station.id)
                continue
            if fare > budget:
                continue
            results.append(Recommendation(
                station=station,
                distance_km=dist,
                fare=fare,
                is_out_of_city=out_of_city,
                dest_region=dest_region,
            ))

        results.sort(key=lambda r: r.fare)
        return results

    async def recommend(self, current_location: Optional[Coordinate], stations: Sequence[Station],
                        budget: float, origin_region: Optional[str], search_text: str = "",
                        token: Optional[CancelToken] = None) -> List[Recommendation]:
        if current_location is None or origin_region is None:
            return []
        if budget is None or not math.isfinite(budget):
            return []

        dest_regions = await self.resolver.resolve_stations(stations, token)
        if token is not None and token.cancelled:
            return []

        ranked = self.rank(current_location, stations, budget, origin_region, dest_regions)
        return filter_by_name(ranked, search_text)
