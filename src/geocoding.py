"""Kakao 로컬 API 기반 역지오코딩 (좌표 → 행정구역)."""

import asyncio
import json
import logging
import os
from urllib.parse import urlencode
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)


class KakaoReverseGeocoder:
    """좌표를 {region, city} 형태의 행정구역 정보로 변환한다."""

    _API_URL = "https://dapi.kakao.com/v2/local/geo/coord2regioncode.json"

    def __init__(self, api_key=None, timeout_seconds=4):
        self.api_key = api_key or os.getenv("KAKAO_REST_API_KEY")
        self.timeout_seconds = timeout_seconds

    def reverse_geocode(self, lat, lng):
        """좌표의 행정구역을 조회한다. 키가 없으면 요청 없이 빈 dict.

        네트워크/응답 오류는 호출자(RegionResolver)에게 그대로 전달된다.
        """
        if not self.api_key:
            return {}

        query = urlencode({"x": float(lng), "y": float(lat)})
        request = Request(
            f"{self._API_URL}?{query}",
            headers={"Authorization": f"KakaoAK {self.api_key}"},
        )
        with urlopen(request, timeout=self.timeout_seconds) as response:
            raw = response.read().decode("utf-8")
        return self._extract_region(raw)

    async def __call__(self, lat, lng):
        return await asyncio.to_thread(self.reverse_geocode, lat, lng)

    def _extract_region(self, raw_body):
        """응답 documents에서 법정동(B) 기준 시/도, 시/군/구를 추출한다."""
        data = json.loads(raw_body)
        documents = data.get("documents") or []
        if not documents:
            return {}

        doc = next((d for d in documents if d.get("region_type") == "B"), documents[0])
        result = {}
        if doc.get("region_1depth_name"):
            result["region"] = doc["region_1depth_name"]
        if doc.get("region_2depth_name"):
            result["city"] = doc["region_2depth_name"]
        return result


METRO_SUFFIXES = ("특별시", "광역시", "특별자치시")


def region_label(result):
    """할증 판단 단위(관할 지역)를 고른다.

    특별시/광역시는 시/도 이름, 도 지역은 시/군 이름 ("성남시 분당구" → "성남시").
    둘 다 없으면 "".
    """
    if not result:
        return ""
    region = result.get("region") or ""
    city_tokens = (result.get("city") or "").split()
    city = city_tokens[0] if city_tokens else ""
    if region.endswith(METRO_SUFFIXES) or not city:
        return region
    return city
