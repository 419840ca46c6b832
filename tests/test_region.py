# -*- coding: utf-8 -*-
"""지역 판별/캐시 테스트"""
import asyncio

import pytest

from src.models import Coordinate, Station
from src.region import CancelToken, RegionCache, RegionResolver, region_from_address

GANGNAM = Coordinate(37.4979, 127.0276)
PANGYO = Coordinate(37.3948, 127.1112)


@pytest.mark.parametrize("address,expected", [
    ("서울특별시 강남구 강남대로 지하 396", "서울특별시"),
    ("경기도 성남시 분당구 판교역로 지하 160", "성남시"),
    ("경기 수원시 팔달구 덕영대로 924", "수원시"),
    ("제주특별자치도 제주시 연동", "제주시"),
    ("인천광역시 중구 공항로 271", "인천광역시"),
    ("성남시 분당구 판교역로", "성남시"),
    ("서울 강남구 테헤란로", "서울특별시"),
    ("강남구 테헤란로 경기도", "경기도"),
    ("테헤란로 156", "테헤란로"),
    ("", ""),
    ("   ", ""),
    (None, ""),
])
def test_region_from_address(address, expected):
    assert region_from_address(address) == expected


def test_region_cache_is_append_only():
    cache = RegionCache()

    assert cache.put("1,2", "서울특별시") == "서울특별시"
    assert cache.put("1,2", "경기도") == "서울특별시"
    assert cache.get("1,2") == "서울특별시"
    assert "1,2" in cache
    assert len(cache) == 1


def test_coordinate_key_format():
    assert Coordinate(37.5, 127.03).key == "37.5,127.03"


def test_resolve_caches_result(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)

    async def scenario():
        first = await resolver.resolve(GANGNAM)
        second = await resolver.resolve(GANGNAM)
        return first, second

    assert asyncio.run(scenario()) == ("서울특별시", "서울특별시")
    assert fake_geocoder.calls == [GANGNAM.key]
    assert resolver.cache.get(GANGNAM.key) == "서울특별시"


def test_concurrent_resolve_shares_one_request():
    calls = []

    async def slow_geocode(lat, lng):
        calls.append((lat, lng))
        await asyncio.sleep(0.01)
        return {"region": "서울특별시"}

    resolver = RegionResolver(slow_geocode)

    async def scenario():
        return await asyncio.gather(*(resolver.resolve(GANGNAM) for _ in range(5)))

    assert asyncio.run(scenario()) == ["서울특별시"] * 5
    assert len(calls) == 1


def test_geocode_failure_resolves_to_unknown(fake_geocoder):
    fake_geocoder.fail_keys.add(GANGNAM.key)
    resolver = RegionResolver(fake_geocoder)

    assert asyncio.run(resolver.resolve(GANGNAM)) == ""
    assert resolver.cache.get(GANGNAM.key) == ""


def test_empty_geocode_result_is_unknown():
    async def empty_geocode(lat, lng):
        return {}

    resolver = RegionResolver(empty_geocode)
    assert asyncio.run(resolver.resolve(GANGNAM)) == ""


def test_cancelled_token_discards_result(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)
    token = CancelToken()
    token.cancel()

    assert asyncio.run(resolver.resolve(GANGNAM, token)) == ""
    assert GANGNAM.key not in resolver.cache


def test_resolve_many_bounds_concurrency():
    state = {"active": 0, "peak": 0}

    async def counting_geocode(lat, lng):
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0.01)
        state["active"] -= 1
        return {"region": "서울특별시"}

    resolver = RegionResolver(counting_geocode, concurrency=2)
    coords = [Coordinate(37.5 + i * 0.01, 127.0) for i in range(6)]

    result = asyncio.run(resolver.resolve_many(coords))

    assert len(result) == 6
    assert state["peak"] <= 2


def test_resolve_many_dedupes_coordinates(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)

    result = asyncio.run(resolver.resolve_many([GANGNAM, PANGYO, GANGNAM]))

    assert result == {GANGNAM.key: "서울특별시", PANGYO.key: "성남시"}
    assert len(fake_geocoder.calls) == 2


def test_resolve_stations_address_strategy_skips_network(fake_geocoder):
    resolver = RegionResolver(fake_geocoder, strategy="address")
    stations = [
        Station(id="1", name="판교", lat=PANGYO.lat, lng=PANGYO.lng,
                station_address="경기도 성남시 분당구 판교역로 지하 160"),
        Station(id="2", name="강남", lat=GANGNAM.lat, lng=GANGNAM.lng),
    ]

    regions = asyncio.run(resolver.resolve_stations(stations))

    assert regions == {"1": "성남시", "2": "서울특별시"}
    assert fake_geocoder.calls == [GANGNAM.key]


def test_resolve_stations_geocode_strategy_ignores_address(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)
    station = Station(id="1", name="강남", lat=GANGNAM.lat, lng=GANGNAM.lng,
                      station_address="경기도 어딘가")

    assert asyncio.run(resolver.resolve_stations([station])) == {"1": "서울특별시"}


def test_invalid_resolver_options():
    with pytest.raises(ValueError):
        RegionResolver(lambda lat, lng: None, strategy="gps")
    with pytest.raises(ValueError):
        RegionResolver(lambda lat, lng: None, concurrency=0)


def test_resolve_right_after_lookup_completes_reuses_result():
    """첫 조회가 끝난 직후 들어온 요청도 외부 호출을 다시 하지 않는다."""
    calls = []

    async def geocode(lat, lng):
        calls.append((lat, lng))
        return {"region": "서울특별시"}

    resolver = RegionResolver(geocode)

    async def late():
        while not calls:
            await asyncio.sleep(0)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        return await resolver.resolve(GANGNAM)

    async def scenario():
        return await asyncio.gather(resolver.resolve(GANGNAM), late())

    assert asyncio.run(scenario()) == ["서울특별시", "서울특별시"]
    assert len(calls) == 1


def test_result_discarded_for_cancelled_token_is_reused_later(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)
    token = CancelToken()
    token.cancel()

    assert asyncio.run(resolver.resolve(GANGNAM, token)) == ""
    assert asyncio.run(resolver.resolve(GANGNAM)) == "서울특별시"
    assert fake_geocoder.calls == [GANGNAM.key]
    assert resolver.cache.get(GANGNAM.key) == "서울특별시"


def test_resolve_origin_does_not_touch_station_cache(fake_geocoder):
    resolver = RegionResolver(fake_geocoder)
    origins = [Coordinate(37.5 + i * 1e-5, 127.03) for i in range(20)]

    async def scenario():
        return [await resolver.resolve_origin(c) for c in origins]

    assert asyncio.run(scenario()) == ["서울특별시"] * 20
    assert len(resolver.cache) == 0


def test_resolve_origin_failure_is_unknown(fake_geocoder):
    fake_geocoder.fail_keys.add(GANGNAM.key)
    resolver = RegionResolver(fake_geocoder)

    assert asyncio.run(resolver.resolve_origin(GANGNAM)) == ""
