from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, Sequence

from .errors import InvalidCriteria, InvalidLimit, MissingOrigin
from .facets import aware
from .filters import compile_criteria
from .models import CatalogEntry, FilterCriteria, GeoPoint, RankedResult, SortMode
from .sorting import annotate, sort_items, within_radius

logger = logging.getLogger(__name__)


def _validate(
    sort_mode: SortMode,
    limit: int,
    origin: GeoPoint | None,
    radius_km: float | None,
    offset: int,
) -> None:
    if limit <= 0:
        raise InvalidLimit(limit)
    if offset < 0:
        raise InvalidCriteria(f"offset must not be negative, got {offset}")
    if radius_km is not None and not (radius_km > 0 and math.isfinite(radius_km)):
        raise InvalidCriteria(f"radius_km must be a positive number, got {radius_km}")
    if radius_km is not None and origin is None:
        raise MissingOrigin("a radius filter")
    if sort_mode is SortMode.distance and origin is None:
        raise MissingOrigin("distance sort")


def discover(
    candidates: Iterable[CatalogEntry],
    criteria: FilterCriteria,
    sort_mode: SortMode,
    limit: int,
    origin: GeoPoint | None = None,
    radius_km: float | None = None,
    offset: int = 0,
    now: datetime | None = None,
) -> RankedResult:
    """
    Turn a candidate snapshot into an ordered, paginated result page.

    Stages run strictly in order: facet filter, radius pre-filter, sort,
    pagination. Inputs are validated before any filtering. ``now`` is read
    once; naive values are taken as UTC.
    """
    try:
        sort_mode = SortMode(sort_mode)
    except ValueError as exc:
        raise InvalidCriteria(f"unknown sort mode {sort_mode!r}") from exc
    _validate(sort_mode, limit, origin, radius_km, offset)

    now = aware(now) if now is not None else datetime.now(timezone.utc)

    predicate = compile_criteria(criteria, now)
    matched = [entry for entry in candidates if predicate(entry)]

    items = annotate(matched, origin)
    if radius_km is not None:
        items = within_radius(items, radius_km)

    ordered = sort_items(items, sort_mode, now.tzinfo)
    page = ordered[offset:offset + limit]

    logger.debug(
        "discover: matched=%d ranked=%d returned=%d sort=%s",
        len(matched), len(ordered), len(page), sort_mode.value,
    )
    return RankedResult(items=tuple(page), total_matches=len(ordered))


def price_ceiling(entries: Sequence[CatalogEntry], step: int = 10000) -> float:
    """Upper bound for a price slider: the highest price rounded up to ``step``."""
    if not entries:
        return 0.0
    highest = max(entry.price for entry in entries)
    return float(math.ceil(highest / step) * step)
