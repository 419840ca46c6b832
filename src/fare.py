# -*- coding: utf-8 -*-
"""
서울 택시 예상요금 계산 (정적 공식, 실시간 교통 미반영)

    fare = base_fare                                   (d <= base_distance)
         = base_fare + ceil((d - base_distance) / unit) * unit_fare
    시외할증: round_half_up(fare * 1.2)

SEOUL_2024 (2.0km / 132m)를 표준으로 사용한다.
SEOUL_LEGACY (1.6km / 131m)는 명시적으로 선택할 때만 사용하며 두 값을 섞지 않는다.
"""
import math
from dataclasses import dataclass


@dataclass(frozen=True)
class FareSchedule:
    base_fare: int = 4800
    base_distance_km: float = 2.0
    unit_m: float = 132.0
    unit_fare: int = 100
    surcharge_rate: float = 1.2


SEOUL_2024 = FareSchedule()
SEOUL_LEGACY = FareSchedule(base_distance_km=1.6, unit_m=131.0)


def round_half_up(value: float) -> int:
    # 1e-9: 4800 * 1.2 == 5760.000000000001 같은 부동소수 오차 흡수
    return int(math.floor(value + 0.5 + 1e-9))


def estimate_fare(distance_km: float, is_out_of_city: bool = False,
                  schedule: FareSchedule = SEOUL_2024) -> int:
    """거리(km)와 시외할증 여부로 예상 택시비(원)를 계산한다."""
    if not math.isfinite(distance_km):
        raise ValueError(f"distance must be finite: {distance_km!r}")

    fare = schedule.base_fare
    if distance_km > schedule.base_distance_km:
        extra_m = round((distance_km - schedule.base_distance_km) * 1000, 6)
        fare += math.ceil(extra_m / schedule.unit_m) * schedule.unit_fare

    if is_out_of_city:
        fare = round_half_up(fare * schedule.surcharge_rate)
    return int(fare)


def is_out_of_city(origin_region: str, dest_region: str) -> bool:
    """두 지역이 모두 알려져 있고 서로 다를 때만 할증."""
    return bool(origin_region) and bool(dest_region) and origin_region != dest_region
