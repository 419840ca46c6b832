# -*- coding: utf-8 -*-
"""하버사인 거리 계산 (km)."""
import math
from typing import Sequence

import numpy as np

from src.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in km. atan2 form stays stable when a overshoots 1.0."""
    lat1_r, lat2_r = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    h = min(max(h, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def distances_km(origin: Coordinate, coords: Sequence[Coordinate]) -> np.ndarray:
    """origin에서 여러 좌표까지의 거리를 한 번에 계산한다."""
    if len(coords) == 0:
        return np.zeros(0)
    lats = np.radians(np.array([c.lat for c in coords], dtype=float))
    lngs = np.radians(np.array([c.lng for c in coords], dtype=float))
    lat0 = math.radians(origin.lat)
    lng0 = math.radians(origin.lng)

    h = (
        np.sin((lats - lat0) / 2) ** 2
        + math.cos(lat0) * np.cos(lats) * np.sin((lngs - lng0) / 2) ** 2
    )
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
