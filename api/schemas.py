from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class RecommendRequest(BaseModel):
    lat: Optional[float] = Field(None, ge=-90.0, le=90.0)  # None이면 위치 정보 없음
    lng: Optional[float] = Field(None, ge=-180.0, le=180.0)
    budget: int = Field(10000, ge=0, le=1_000_000)
    search: str = Field("", max_length=50)
    origin_region: Optional[str] = Field(None, max_length=30)  # None이면 좌표로 판별


class StationItem(BaseModel):
    id: str
    name: str
    lat: float
    lng: float
    line_name: str = ""
    transfer_line_name: Optional[str] = None
    station_address: Optional[str] = None


class RecommendationItem(StationItem):
    distance_km: float
    fare: int
    is_out_of_city: bool
    dest_region: str


class RecommendResponse(BaseModel):
    status: Literal["ok", "location_unavailable"]
    budget: int
    search: str = ""
    origin_region: Optional[str] = None
    count: int
    stations: List[RecommendationItem]


class RegionResponse(BaseModel):
    lat: float
    lng: float
    region: str  # ""이면 미확인 지역
