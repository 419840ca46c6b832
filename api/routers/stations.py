# -*- coding: utf-8 -*-
from typing import List

from fastapi import APIRouter, Query
from api.dependencies import registry
from api.schemas import RegionResponse, StationItem
from src.models import Coordinate

router = APIRouter()


@router.get(
    "/stations",
    response_model=List[StationItem],
    summary="역 목록 조회",
    description="검증/중복 제거된 역 카탈로그를 반환합니다. "
    "q를 지정하면 역 이름 부분 일치(대소문자 무시)로 필터링합니다.",
    response_description="역 목록 (id, 이름, 좌표, 노선, 주소)",
)
async def get_stations(q: str = Query("", max_length=50, description="역 이름 검색어")):
    catalog = registry.get_catalog()
    needle = q.lower()
    return [
        StationItem(
            id=s.id,
            name=s.name,
            lat=s.lat,
            lng=s.lng,
            line_name=s.line_name,
            transfer_line_name=s.transfer_line_name,
            station_address=s.station_address,
        )
        for s in catalog.stations
        if not needle or needle in s.name.lower()
    ]


@router.get(
    "/region",
    response_model=RegionResponse,
    summary="좌표 행정구역 조회",
    description="주어진 위도/경도의 관할 지역(특별시·광역시 또는 도 내 시·군)을 역지오코딩으로 판별합니다. "
    "판별 실패 시 빈 문자열을 반환합니다.",
    response_description="좌표와 지역명",
)
async def get_region(
    lat: float = Query(..., ge=-90.0, le=90.0, description="위도 (예: 37.4979)"),
    lng: float = Query(..., ge=-180.0, le=180.0, description="경도 (예: 127.0276)"),
):
    region = await registry.origin_region(Coordinate(lat, lng))
    return RegionResponse(lat=lat, lng=lng, region=region)
