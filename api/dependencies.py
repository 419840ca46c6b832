"""
카탈로그/지역 판별기/파이프라인 관리.
앱 시작 시 한 번 로드하고, 모든 요청에서 재사용한다.
"""
import os
import sys
import threading
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from api.cache import origin_cache
from src.catalog import StationCatalog
from src.geocoding import KakaoReverseGeocoder
from src.pipeline import RecommendationPipeline
from src.models import Coordinate
from src.region import CancelToken, RegionResolver


class AppRegistry:
    def __init__(self):
        self.catalog: StationCatalog | None = None
        self.resolver: RegionResolver | None = None
        self.pipeline: RecommendationPipeline | None = None
        self.token = CancelToken()
        self.lock = threading.RLock()  # Protects catalog swap on reload

    def load(self):
        stations_path = os.getenv("STATIONS_PATH", str(PROJECT_ROOT / "data" / "stations.json"))
        catalog = StationCatalog(stations_path)
        catalog.load()

        if self.resolver is None:
            geocoder = KakaoReverseGeocoder(
                timeout_seconds=float(os.getenv("GEOCODE_TIMEOUT", "4")),
            )
            self.resolver = RegionResolver(
                geocoder,
                strategy=os.getenv("REGION_STRATEGY", "geocode").lower(),
                concurrency=int(os.getenv("GEOCODE_CONCURRENCY", "4")),
            )
            self.pipeline = RecommendationPipeline(self.resolver)

        # 이전 세대의 진행 중 조회 결과는 버린다
        self.token.cancel()
        self.token = CancelToken()
        self.catalog = catalog

    async def origin_region(self, location: Coordinate) -> str:
        """사용자 위치의 출발 지역. 역 좌표 캐시가 아닌 크기 제한 캐시에 둔다."""
        cached = origin_cache.get(location.key)
        if cached is not None:
            return cached
        region = await self.get_pipeline().resolver.resolve_origin(location)
        origin_cache.set(location.key, region)
        return region

    def shutdown(self):
        self.token.cancel()

    def get_catalog(self) -> StationCatalog:
        if self.catalog is None:
            raise RuntimeError("Catalog not loaded")
        return self.catalog

    def get_pipeline(self) -> RecommendationPipeline:
        if self.pipeline is None:
            raise RuntimeError("Catalog not loaded")
        return self.pipeline


registry = AppRegistry()
