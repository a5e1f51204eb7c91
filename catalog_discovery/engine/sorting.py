from __future__ import annotations

from datetime import timezone, tzinfo
from typing import Iterable

from .errors import MissingOrigin
from .facets import localize
from .geo import distance_km
from .models import CatalogEntry, GeoPoint, RankedItem, SortMode


def annotate(entries: Iterable[CatalogEntry], origin: GeoPoint | None) -> list[RankedItem]:
    """Pair each entry with its distance from ``origin`` (None when unknown)."""
    items: list[RankedItem] = []
    for entry in entries:
        location = entry.location
        if origin is not None and location is not None:
            items.append(RankedItem(entry, distance_km(origin, location)))
        else:
            items.append(RankedItem(entry, None))
    return items


def within_radius(items: Iterable[RankedItem], radius_km: float) -> list[RankedItem]:
    """Radius pre-filter: keep entries with a known distance of at most ``radius_km``."""
    return [
        item
        for item in items
        if item.distance_km is not None and item.distance_km <= radius_km
    ]


def sort_items(
    items: Iterable[RankedItem],
    mode: SortMode,
    tz: tzinfo = timezone.utc,
) -> list[RankedItem]:
    """
    Order ``items`` by ``mode`` with a total, deterministic tie-break chain.

    Each chain is applied as successive stable sorts, least significant key
    first.

    - newest:     created_at desc, id asc
    - oldest:     created_at asc, id asc
    - price_asc:  effective price asc, created_at desc, id asc
    - price_desc: effective price desc, created_at desc, id asc
    - relevance:  featured desc, rating desc, review_count desc, id asc
    - distance:   distance asc, id asc (items without a distance are dropped)
    """
    mode = SortMode(mode)

    def created(item: RankedItem):
        return localize(item.entry.created_at, tz)

    ordered = sorted(items, key=lambda item: item.entry.id)

    if mode is SortMode.newest:
        ordered.sort(key=created, reverse=True)
    elif mode is SortMode.oldest:
        ordered.sort(key=created)
    elif mode in (SortMode.price_asc, SortMode.price_desc):
        ordered.sort(key=created, reverse=True)
        ordered.sort(
            key=lambda item: item.entry.effective_price,
            reverse=mode is SortMode.price_desc,
        )
    elif mode is SortMode.relevance:
        ordered.sort(
            key=lambda item: (
                item.entry.is_featured,
                item.entry.rating,
                item.entry.review_count,
            ),
            reverse=True,
        )
    elif mode is SortMode.distance:
        ordered = [item for item in ordered if item.distance_km is not None]
        ordered.sort(key=lambda item: item.distance_km)
    else:
        raise ValueError(f"Unhandled sort mode: {mode!r}")

    return ordered


def rank(
    entries: Iterable[CatalogEntry],
    mode: SortMode,
    origin: GeoPoint | None = None,
    tz: tzinfo = timezone.utc,
) -> list[RankedItem]:
    """Annotate ``entries`` with distances and order them by ``mode``."""
    if SortMode(mode) is SortMode.distance and origin is None:
        raise MissingOrigin("distance sort")
    return sort_items(annotate(entries, origin), mode, tz)
