from __future__ import annotations

import logging

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .discovery.cache import get_cache_stats
from .discovery.config import DEFAULT_DISCOVERY_CONFIG
from .discovery.models import DiscoverRequest, DiscoveryResponse
from .discovery.service import catalog_metadata, run_discovery, run_nearby
from .engine.errors import DiscoveryError
from .engine.models import Category

logger = logging.getLogger(__name__)

app = FastAPI(title="Catalog Discovery API", version="1.0.0")


@app.exception_handler(DiscoveryError)
async def discovery_error_handler(request: Request, exc: DiscoveryError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content={"code": exc.code, "message": exc.message},
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return catalog_metadata()


@app.post("/discover", response_model=DiscoveryResponse)
def discover_endpoint(body: DiscoverRequest) -> DiscoveryResponse:
    return run_discovery(body)


@app.get("/nearby", response_model=DiscoveryResponse)
def nearby(
    lat: float | None = None,
    lon: float | None = None,
    category: list[Category] = Query(default=[]),
    radius_km: float = Query(default=DEFAULT_DISCOVERY_CONFIG.nearby_radius_km, gt=0.0),
    limit: int = Query(default=DEFAULT_DISCOVERY_CONFIG.nearby_limit, ge=1, le=50),
) -> DiscoveryResponse:
    return run_nearby(
        lat=lat,
        lon=lon,
        categories=category,
        radius_km=radius_km,
        limit=limit,
    )


# ── Operational endpoints ────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
