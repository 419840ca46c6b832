# -*- coding: utf-8 -*-
"""
Metrofare FastAPI Application
"""
import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import registry
from api.routers import recommend, stations

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry.load()
    yield
    registry.shutdown()


app = FastAPI(title="Metrofare", version=VERSION, lifespan=lifespan)


allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(recommend.router, prefix="/api", tags=["recommend"])
app.include_router(stations.router, prefix="/api", tags=["stations"])


@app.get(
    "/health",
    summary="서비스 상태 확인",
    description="카탈로그 로드 여부, 역 수, 제외된 레코드 수 등 서비스 상태를 반환합니다.",
    response_description="status(healthy/degraded/unavailable), version, stations 수, excluded 수",
)
async def health():
    try:
        catalog = registry.get_catalog()
        station_count = len(catalog.stations)
        return {
            "status": "healthy" if station_count > 0 else "degraded",
            "version": VERSION,
            "stations": station_count,
            "excluded": catalog.excluded_count,
            "region_cache": len(registry.get_pipeline().resolver.cache),
        }
    except RuntimeError:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "Catalog not loaded"},
        )


@app.post(
    "/api/reload",
    summary="데이터 리로드",
    description="역 데이터(stations.json)가 갱신된 후 카탈로그를 다시 로드합니다. "
               "진행 중인 지역 조회는 폐기되고 추천 캐시도 함께 무효화됩니다.",
    response_description="리로드 성공 여부(status), 메시지, 역 수",
)
async def reload_data():
    """데이터를 다시 로드한다. 새 JSON 파일 반영 시 사용."""
    try:
        with registry.lock:
            registry.load()
            from api.cache import invalidate_budget_cache
            invalidate_budget_cache()
        catalog = registry.get_catalog()
        return {
            "status": "ok",
            "message": "데이터가 성공적으로 다시 로드되었습니다.",
            "stations": len(catalog.stations),
            "excluded": catalog.excluded_count,
        }
    except Exception as e:
        logging.exception("Data reload failed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "detail": f"데이터 리로드 실패: {str(e)}"},
        )
