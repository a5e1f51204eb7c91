from __future__ import annotations

import logging
import math
import time
from datetime import datetime, timedelta, timezone

from ..analytics.store import record_event
from ..engine.errors import InvalidCriteria
from ..engine.models import (
    Category,
    Condition,
    EntryKind,
    FilterCriteria,
    GeoPoint,
    RankedResult,
    Recency,
    SortMode,
)
from ..engine.pipeline import discover, price_ceiling
from .cache import cache_get, cache_set, make_key
from .config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from .data_store import get_candidates, get_cities
from .models import (
    DiscoverRequest,
    DiscoveryItem,
    DiscoveryResponse,
    EntryOut,
    OriginIn,
)

logger = logging.getLogger(__name__)


def local_now(config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG) -> datetime:
    """Single clock read for a query, in the catalog's local timezone."""
    tz = timezone(timedelta(hours=config.utc_offset_hours))
    return datetime.now(tz)


def _criteria_from(request: DiscoverRequest) -> FilterCriteria:
    return FilterCriteria(
        categories=frozenset(request.categories),
        kinds=frozenset(request.kinds),
        min_price=request.min_price,
        max_price=request.max_price if request.max_price is not None else math.inf,
        conditions=frozenset(request.conditions),
        cities=frozenset(request.cities),
        recency=request.recency,
        delivery_required=request.delivery_required,
        negotiable_only=request.negotiable_only,
        verified_only=request.verified_only,
        query=request.query,
    )


def _to_response(
    result: RankedResult,
    request: DiscoverRequest,
    origin_is_fallback: bool,
) -> DiscoveryResponse:
    items: list[DiscoveryItem] = []
    for item in result:
        entry = item.entry
        items.append(DiscoveryItem(
            entry=EntryOut(
                **entry.model_dump(exclude={"expires_at", "is_active", "is_approved"}),
                effective_price=entry.effective_price,
            ),
            distance_km=round(item.distance_km, 3) if item.distance_km is not None else None,
        ))
    return DiscoveryResponse(
        results=items,
        total_matches=result.total_matches,
        limit=request.limit,
        offset=request.offset,
        origin=request.origin,
        origin_is_fallback=origin_is_fallback,
    )


def _record_search(
    request: DiscoverRequest,
    response: DiscoveryResponse,
    start_time: float,
    cache_hit: bool,
    surface: str,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("search", {
        "surface": surface,
        "categories": [c.value for c in request.categories],
        "kinds": [k.value for k in request.kinds],
        "conditions": [c.value for c in request.conditions],
        "cities": request.cities,
        "recency": request.recency.value,
        "price_filtered": request.min_price > 0 or request.max_price is not None,
        "delivery_required": request.delivery_required,
        "negotiable_only": request.negotiable_only,
        "verified_only": request.verified_only,
        "query": request.query,
        "sort": request.sort.value,
        "radius_km": request.radius_km,
        "origin_is_fallback": response.origin_is_fallback,
        "total_matches": response.total_matches,
        "results_returned": len(response.results),
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })


def run_discovery(
    request: DiscoverRequest,
    now: datetime | None = None,
    origin_is_fallback: bool = False,
    surface: str = "discover",
) -> DiscoveryResponse:
    start_time = time.time()
    now = now or local_now()

    # Validated before the cache so malformed queries always fail loudly
    criteria = _criteria_from(request)
    origin = GeoPoint(request.origin.lat, request.origin.lon) if request.origin else None

    request_dict = request.model_dump(mode="json")
    request_dict["_fallback"] = origin_is_fallback
    key = make_key(request_dict, now.date().isoformat())
    cached = cache_get(key)
    if cached is not None:
        _record_search(request, cached, start_time, True, surface)
        # Cached pages are shared; hand out a copy
        return cached.model_copy(deep=True)

    candidates = get_candidates([c.value for c in request.categories])
    result = discover(
        candidates,
        criteria,
        request.sort,
        request.limit,
        origin=origin,
        radius_km=request.radius_km,
        offset=request.offset,
        now=now,
    )
    response = _to_response(result, request, origin_is_fallback)
    logger.info(
        "%s: %d candidates, %d matches, %d returned",
        surface, len(candidates), result.total_matches, len(result),
    )

    cache_set(key, response.model_copy(deep=True))
    _record_search(request, response, start_time, False, surface)
    return response


def run_nearby(
    lat: float | None = None,
    lon: float | None = None,
    categories: list[Category] | None = None,
    radius_km: float | None = None,
    limit: int | None = None,
    config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG,
    now: datetime | None = None,
) -> DiscoveryResponse:
    """
    "Near you" discovery: verified vendors within a radius, nearest first.

    Classified listings and unverified businesses never appear in this feed.
    When the caller has no resolved position the configured city centre is
    used instead and the response says so via ``origin_is_fallback``.
    """
    if (lat is None) != (lon is None):
        raise InvalidCriteria("lat and lon must be given together")
    origin_is_fallback = lat is None or lon is None
    if origin_is_fallback:
        lat, lon = config.fallback_lat, config.fallback_lon

    request = DiscoverRequest(
        categories=categories or [],
        kinds=[EntryKind.vendor],
        verified_only=True,
        sort=SortMode.distance,
        origin=OriginIn(lat=lat, lon=lon),
        radius_km=radius_km if radius_km is not None else config.nearby_radius_km,
        limit=limit if limit is not None else config.nearby_limit,
    )
    return run_discovery(
        request, now=now, origin_is_fallback=origin_is_fallback, surface="nearby",
    )


def catalog_metadata(config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG) -> dict:
    """Facet vocabularies and the price slider bound for filter UIs."""
    return {
        "categories": [c.value for c in Category],
        "kinds": [k.value for k in EntryKind],
        "conditions": [c.value for c in Condition],
        "recency": [r.value for r in Recency],
        "sort_modes": [s.value for s in SortMode],
        "cities": get_cities(),
        "max_price": price_ceiling(get_candidates(), step=config.price_step),
    }
