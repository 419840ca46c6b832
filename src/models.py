# -*- coding: utf-8 -*-
"""역/좌표/추천 결과 데이터 모델."""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    @property
    def key(self) -> str:
        """지역 캐시 키 ("lat,lng")"""
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True)
class Station:
    """검증된 역 레코드. 카탈로그 생성 이후 변경되지 않는다."""
    id: str
    name: str
    lat: float
    lng: float
    line_name: str = ""
    transfer_line_name: Optional[str] = None
    station_address: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Station":
        """변환기 JSON 레코드(camelCase 키)로부터 생성. 검증은 catalog에서 끝난 상태여야 한다."""
        return cls(
            id=str(record["id"]),
            name=str(record.get("name") or ""),
            lat=float(record["lat"]),
            lng=float(record["lng"]),
            line_name=str(record.get("lineName") or ""),
            transfer_line_name=_optional_str(record.get("transferLineName")),
            station_address=_optional_str(record.get("stationAddress")),
        )


@dataclass(frozen=True)
class Recommendation:
    station: Station
    distance_km: float
    fare: int
    is_out_of_city: bool
    dest_region: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.station)
        data.update(
            distance_km=round(self.distance_km, 2),
            fare=self.fare,
            is_out_of_city=self.is_out_of_city,
            dest_region=self.dest_region,
        )
        return data
