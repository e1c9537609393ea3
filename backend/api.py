"""FastAPI backend for the isometric permit overlay."""
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Union

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from calibration import CalibrationInputError, CalibrationSession
from common.config import (
    API_HOST,
    API_PORT,
    CORS_ORIGINS,
    DAYS_BACK_CHOICES,
    FLY_TO_MIN_ZOOM,
    LOD_T1,
    LOD_T2,
    PERMITS_AUTO_REFRESH,
    permit_settings,
)
from labels import build_label_entities, classify_tier
from overlay import project_entities
from permits import (
    ALL_BOROUGHS,
    ALL_JOB_TYPES,
    OTHER,
    FilterState,
    PermitRefresher,
    PermitSource,
    PermitStore,
    apply_filters,
    category_style,
    format_address,
    format_date,
    recent_permits,
)
from projection import (
    DEFAULT_CAMERA,
    DEFAULT_IMAGE_DIMENSIONS,
    DEFAULT_SEED_PIXEL,
    project_to_image_pixel,
)
from viewport import ViewportAdapter

logger = logging.getLogger(__name__)

adapter = ViewportAdapter(DEFAULT_IMAGE_DIMENSIONS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = PermitStore()
    source = PermitSource(permit_settings)
    refresher = PermitRefresher(
        fetch=source.fetch,
        store=store,
        interval_seconds=permit_settings.refresh_interval_sec,
        days_back=permit_settings.default_days_back,
    )
    app.state.permit_store = store
    app.state.refresher = refresher
    app.state.labels = build_label_entities(DEFAULT_CAMERA, DEFAULT_SEED_PIXEL, adapter)
    app.state.calibration = CalibrationSession(DEFAULT_CAMERA, adapter)

    if PERMITS_AUTO_REFRESH:
        refresher.start()
    else:
        logger.info("Permit auto-refresh disabled; waiting for POST /api/permits/refresh")

    yield

    await refresher.stop()


app = FastAPI(
    title="Permit Pulse Backend API",
    description="Geocoded building permits projected onto the isometric NYC raster",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(CORS_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


class CalibrationPointRequest(BaseModel):
    label: str
    lat: Union[float, str]
    lng: Union[float, str]
    image_pixel_x: int = Field(..., alias="imagePixelX")
    image_pixel_y: int = Field(..., alias="imagePixelY")

    model_config = ConfigDict(populate_by_name=True)


def _split_csv(raw: str | None) -> set[str] | None:
    if raw is None:
        return None
    return {part.strip().upper() for part in raw.split(",") if part.strip()}


def _filters(job_types: str | None, boroughs: str | None) -> FilterState:
    filters = FilterState()
    parsed_types = _split_csv(job_types)
    parsed_boroughs = _split_csv(boroughs)
    if parsed_types is not None:
        filters.job_types = parsed_types
    if parsed_boroughs is not None:
        filters.boroughs = parsed_boroughs
    return filters


def _fit_payload(fit) -> dict:
    # Undefined metrics are inf; JSON mode writes them as null
    return json.loads(fit.model_dump_json())


def _loaded_snapshot(request: Request):
    store: PermitStore = request.app.state.permit_store
    snapshot = store.snapshot
    if not snapshot.is_loaded:
        detail = "Permit data not loaded yet"
        if store.last_error:
            detail = f"{detail}: {store.last_error}"
        raise HTTPException(status_code=503, detail=detail)
    return store, snapshot


@app.get("/")
def read_root():
    return {
        "status": "ok",
        "message": "Permit Pulse Backend API is running",
        "endpoints": {
            "map_config": "/api/map/config",
            "project": "/api/project",
            "permits": "/api/permits",
            "permits_recent": "/api/permits/recent",
            "permits_refresh": "/api/permits/refresh",
            "labels": "/api/labels",
            "calibration": "/api/calibration",
            "calibration_points": "/api/calibration/points",
            "calibration_export": "/api/calibration/export",
            "calibration_reset": "/api/calibration/reset",
            "health": "/health",
        },
    }


@app.get("/health")
def health_check(request: Request):
    store: PermitStore = request.app.state.permit_store
    refresher: PermitRefresher = request.app.state.refresher
    snapshot = store.snapshot
    return {
        "status": "ok",
        "permits_loaded": snapshot.is_loaded,
        "snapshot_sequence": snapshot.sequence,
        "refresher_running": refresher.is_running,
        "last_error": store.last_error,
    }


@app.get("/api/map/config")
def get_map_config():
    return {
        "camera": DEFAULT_CAMERA.model_dump(),
        "meters_per_pixel": {
            "x": DEFAULT_CAMERA.meters_per_pixel_x,
            "y": DEFAULT_CAMERA.meters_per_pixel_y,
        },
        "seed_pixel": DEFAULT_SEED_PIXEL.model_dump(),
        "image": DEFAULT_IMAGE_DIMENSIONS.model_dump(),
        "lod_thresholds": [LOD_T1, LOD_T2],
        "fly_to_min_zoom": FLY_TO_MIN_ZOOM,
        "job_types": [category_style(code)._asdict() for code in (*ALL_JOB_TYPES, OTHER)],
        "boroughs": list(ALL_BOROUGHS),
    }


@app.get("/api/project")
def project_point(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    x, y = project_to_image_pixel(DEFAULT_CAMERA, DEFAULT_SEED_PIXEL, lat, lng)
    vp = adapter.image_pixel_to_viewport_point(x, y)
    return {
        "image_x": x,
        "image_y": y,
        "vp_x": vp.x,
        "vp_y": vp.y,
        "in_bounds": adapter.contains(x, y),
    }


@app.get("/api/permits")
def get_permits(
    request: Request,
    job_types: str | None = None,
    boroughs: str | None = None,
):
    store, snapshot = _loaded_snapshot(request)
    filtered = apply_filters(snapshot.entities, _filters(job_types, boroughs))
    markers = project_entities(filtered, DEFAULT_CAMERA, DEFAULT_SEED_PIXEL, adapter)
    return {
        "count": len(filtered),
        "placed": len(markers),
        "sequence": snapshot.sequence,
        "days_back": snapshot.days_back,
        "fetched_at": snapshot.fetched_at.isoformat(),
        "error": store.last_error,
        "markers": [m.to_dict() for m in markers],
    }


@app.get("/api/permits/recent")
def get_recent_permits(
    request: Request,
    job_types: str | None = None,
    boroughs: str | None = None,
    limit: int = Query(permit_settings.recent_limit, ge=1, le=200),
):
    _, snapshot = _loaded_snapshot(request)
    filtered = apply_filters(snapshot.entities, _filters(job_types, boroughs))
    rows = []
    for entity in recent_permits(filtered, limit=limit):
        style = category_style(entity.category_code)
        rows.append({
            "job_number": entity.job_number,
            "category": style.code,
            "emoji": style.emoji,
            "color": style.color,
            "address": format_address(entity),
            "date": format_date(entity.issued_date or entity.filing_date),
            "lat": entity.latitude,
            "lng": entity.longitude,
        })
    return {"permits": rows}


@app.post("/api/permits/refresh", status_code=202)
async def refresh_permits(request: Request, days_back: int | None = None):
    refresher: PermitRefresher = request.app.state.refresher
    if days_back is not None:
        if days_back not in DAYS_BACK_CHOICES:
            raise HTTPException(status_code=400, detail=f"days_back must be one of {list(DAYS_BACK_CHOICES)}")
        ran = await refresher.set_days_back(days_back)
    else:
        ran = await refresher.refresh()
    store: PermitStore = request.app.state.permit_store
    # commit() clears last_error, so a remaining error belongs to this run
    if ran and store.last_error:
        raise HTTPException(status_code=502, detail=store.last_error)
    snapshot = store.snapshot
    return {
        "status": "refreshed" if ran else "coalesced",
        "sequence": snapshot.sequence,
        "days_back": refresher.days_back,
    }


@app.get("/api/labels")
def get_labels(request: Request, zoom: float = Query(..., gt=0)):
    tier = classify_tier(zoom, LOD_T1, LOD_T2)
    visible = [label for label in request.app.state.labels if label.shown_at(tier)]
    return {
        "zoom": zoom,
        "tier": int(tier),
        "tier_name": tier.name.lower(),
        "labels": [label.to_dict() for label in visible],
    }


@app.get("/api/calibration")
def get_calibration(request: Request):
    session: CalibrationSession = request.app.state.calibration
    fit = session.fit
    return {"valid": fit.is_valid, "fit": _fit_payload(fit)}


@app.post("/api/calibration/points", status_code=201)
def add_calibration_point(request: Request, body: CalibrationPointRequest):
    session: CalibrationSession = request.app.state.calibration
    try:
        fit = session.add_tagged(body.label, body.lat, body.lng, body.image_pixel_x, body.image_pixel_y)
    except CalibrationInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {
        "point_count": len(session.points),
        "valid": fit.is_valid,
        "fit": _fit_payload(fit),
    }


@app.get("/api/calibration/export")
def export_calibration(request: Request):
    session: CalibrationSession = request.app.state.calibration
    return session.export()


@app.post("/api/calibration/reset", status_code=204)
def reset_calibration(request: Request):
    session: CalibrationSession = request.app.state.calibration
    session.reset()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=API_HOST, port=API_PORT, workers=1, loop="asyncio")
