import logging

from fastapi import APIRouter, HTTPException
from api.schemas import RecommendRequest, RecommendResponse, RecommendationItem
from api.dependencies import registry
from api.cache import budget_cache
from src.models import Coordinate
from src.pipeline import filter_by_name

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/recommend",
    response_model=RecommendResponse,
    summary="예산 내 추천 역",
    description="현재 위치에서 택시로 이동할 때 예상 요금이 예산 이하인 역을 요금 오름차순으로 반환합니다. "
    "출발지와 도착지의 시/도가 다르면 시외할증(20%)이 적용됩니다. "
    "search를 지정하면 역 이름으로 추가 필터링합니다.",
    response_description="예상 요금 오름차순 추천 역 목록 (거리, 요금, 할증 여부, 도착 지역 포함)",
)
async def recommend(req: RecommendRequest):
    pipeline = registry.get_pipeline()
    catalog = registry.get_catalog()
    token = registry.token

    # 위치 정보 없음: 추천 불가 상태로 응답
    if req.lat is None or req.lng is None:
        return RecommendResponse(
            status="location_unavailable", budget=req.budget, search=req.search,
            origin_region=req.origin_region, count=0, stations=[],
        )

    location = Coordinate(req.lat, req.lng)
    origin_region = req.origin_region
    if origin_region is None:
        origin_region = await registry.origin_region(location)

    ranked = budget_cache.get((req.lat, req.lng, req.budget, origin_region))
    if ranked is None:
        try:
            ranked = await pipeline.recommend(
                location, catalog.stations, req.budget, origin_region, token=token
            )
        except Exception as e:
            logger.error(f"Recommend failed: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="추천 계산 중 오류가 발생했습니다")
        if not token.cancelled:
            budget_cache.set((req.lat, req.lng, req.budget, origin_region), ranked)

    results = filter_by_name(ranked, req.search)
    return RecommendResponse(
        status="ok",
        budget=req.budget,
        search=req.search,
        origin_region=origin_region,
        count=len(results),
        stations=[RecommendationItem(**r.to_dict()) for r in results],
    )
