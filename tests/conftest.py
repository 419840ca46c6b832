"""
pytest 설정 파일
"""
import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# 프로젝트 루트를 sys.path에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


class FakeGeocoder:
    """좌표 범위로 시/도를 돌려주는 역지오코더 (호출 기록 포함)"""

    def __init__(self, fail_keys=()):
        self.calls = []
        self.fail_keys = set(fail_keys)

    async def __call__(self, lat, lng):
        key = f"{lat},{lng}"
        self.calls.append(key)
        if key in self.fail_keys:
            raise RuntimeError("geocode fail")
        if lng < 126.8:
            return {"region": "인천광역시", "city": "중구"}
        if lat < 37.30:
            return {"region": "경기도", "city": "수원시 팔달구"}
        if lat < 37.43:
            return {"region": "경기도", "city": "성남시 분당구"}
        return {"region": "서울특별시", "city": "강남구"}


@pytest.fixture
def sample_records():
    """변환기 출력 형식의 샘플 역 레코드"""
    return [
        {"id": "222", "name": "강남", "lat": 37.4979, "lng": 127.0276,
         "lineName": "2호선", "transferLineName": "신분당선",
         "stationAddress": "서울특별시 강남구 강남대로 지하 396"},
        {"id": "221", "name": "역삼", "lat": 37.5004, "lng": 127.0364,
         "lineName": "2호선", "transferLineName": "",
         "stationAddress": "서울특별시 강남구 테헤란로 지하 156"},
        {"id": "K222", "name": "판교", "lat": 37.3948, "lng": 127.1112,
         "lineName": "신분당선", "transferLineName": "경강선",
         "stationAddress": "경기도 성남시 분당구 판교역로 지하 160"},
        {"id": "A01", "name": "인천공항1터미널", "lat": 37.4474, "lng": 126.4523,
         "lineName": "공항철도", "stationAddress": "인천광역시 중구 공항로 271"},
    ]


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder()


@pytest.fixture
def stations_file(tmp_path, sample_records):
    path = tmp_path / "stations.json"
    path.write_text(json.dumps(sample_records, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def test_client(monkeypatch, stations_file, fake_geocoder):
    """FastAPI 테스트 클라이언트 픽스처 (가짜 역지오코더 사용)"""
    from api.app import app
    from api.cache import invalidate_budget_cache, origin_cache
    from api.dependencies import registry
    from src.pipeline import RecommendationPipeline
    from src.region import RegionResolver

    monkeypatch.setenv("STATIONS_PATH", str(stations_file))
    resolver = RegionResolver(fake_geocoder)
    monkeypatch.setattr(registry, "resolver", resolver)
    monkeypatch.setattr(registry, "pipeline", RecommendationPipeline(resolver))
    monkeypatch.setattr(registry, "catalog", None)
    origin_cache.invalidate()
    invalidate_budget_cache()

    with TestClient(app) as client:
        yield client

    invalidate_budget_cache()
    origin_cache.invalidate()
