# -*- coding: utf-8 -*-
"""
역 데이터셋 검증/중복 제거
- 위도/경도가 숫자가 아니거나 NaN이면 제외
- id가 비어 있으면 제외, 같은 id는 처음 나온 레코드만 유지
- 통과한 레코드의 원래 순서는 유지 (요금 동률 시 정렬 기준)
"""
import json
import logging
import math
from numbers import Real
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from src.models import Station

logger = logging.getLogger(__name__)


def _valid_number(value: Any, limit: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    if pd.isna(value) or not math.isfinite(value):
        return False
    return -limit <= value <= limit


def _normalize_id(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def build_catalog(records: Iterable[Dict[str, Any]]) -> List[Station]:
    """원시 레코드 목록을 검증된 Station 목록으로 변환한다 (순수 함수)."""
    stations: List[Station] = []
    seen = set()
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            logger.debug("record #%d skipped: not an object", idx)
            continue
        if not (_valid_number(record.get("lat"), 90.0) and _valid_number(record.get("lng"), 180.0)):
            logger.debug("record #%d skipped: invalid coordinate", idx)
            continue
        station_id = _normalize_id(record.get("id"))
        if not station_id:
            logger.debug("record #%d skipped: empty id", idx)
            continue
        if station_id in seen:
            logger.debug("record #%d skipped: duplicate id %s", idx, station_id)
            continue
        seen.add(station_id)
        stations.append(Station.from_record({**record, "id": station_id}))
    return stations


def load_station_records(path) -> List[Dict[str, Any]]:
    """변환기가 생성한 stations.json을 읽는다."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"역 데이터는 JSON 배열이어야 합니다: {path}")
    return data


class StationCatalog:
    """데이터셋 1회 로드 후 프로세스 수명 동안 재사용되는 역 카탈로그."""

    def __init__(self, stations_path="data/stations.json"):
        self.stations_path = Path(stations_path)
        self._stations: Optional[List[Station]] = None
        self.total_records = 0

    def load(self) -> List[Station]:
        records = load_station_records(self.stations_path)
        self._stations = build_catalog(records)
        self.total_records = len(records)
        logger.info(
            "Station catalog loaded: %d stations (%d excluded) from %s",
            len(self._stations), self.excluded_count, self.stations_path,
        )
        return self._stations

    @property
    def stations(self) -> List[Station]:
        if self._stations is None:
            self.load()
        return self._stations

    @property
    def excluded_count(self) -> int:
        if self._stations is None:
            return 0
        return self.total_records - len(self._stations)
