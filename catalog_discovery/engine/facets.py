from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone, tzinfo
from typing import AbstractSet, TypeVar

from .models import CatalogEntry, FilterCriteria, Recency

T = TypeVar("T")


def facet_allows(selected: AbstractSet[T], value: T | None) -> bool:
    """An empty selection allows every value; a missing value fails a non-empty one."""
    if not selected:
        return True
    return value is not None and value in selected


def aware(moment: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def localize(moment: datetime, tz: tzinfo) -> datetime:
    """Interpret naive datetimes in ``tz`` and convert aware ones to it."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def _minus_one_month(moment: datetime) -> datetime:
    year, month = moment.year, moment.month - 1
    if month == 0:
        year, month = year - 1, 12
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def recency_start(recency: Recency, now: datetime) -> datetime | None:
    """Earliest creation time admitted by ``recency``, or None for no bound."""
    if recency is Recency.all:
        return None
    if recency is Recency.today:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if recency is Recency.week:
        return now - timedelta(days=7)
    if recency is Recency.month:
        return _minus_one_month(now)
    raise ValueError(f"Unhandled recency token: {recency!r}")


# ---------------------------------------------------------------------------
# Structural gate
# ---------------------------------------------------------------------------


def is_listed(entry: CatalogEntry, now: datetime) -> bool:
    """Active, approved and not expired. Applied to every query."""
    if not (entry.is_active and entry.is_approved):
        return False
    if entry.expires_at is not None:
        now = aware(now)
        return localize(entry.expires_at, now.tzinfo) > now
    return True


# ---------------------------------------------------------------------------
# Facets
# ---------------------------------------------------------------------------


def category_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return facet_allows(criteria.categories, entry.category)


def kind_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return facet_allows(criteria.kinds, entry.kind)


def price_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return criteria.min_price <= entry.effective_price <= criteria.max_price


def condition_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return facet_allows(criteria.conditions, entry.condition)


def city_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    city = entry.city.strip().casefold() if entry.city else None
    return facet_allows(criteria.cities, city)


def recency_matches(entry: CatalogEntry, since: datetime | None) -> bool:
    if since is None:
        return True
    since = aware(since)
    return localize(entry.created_at, since.tzinfo) >= since


def delivery_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return not criteria.delivery_required or entry.delivery_available


def negotiable_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return not criteria.negotiable_only or entry.is_negotiable


def verified_matches(entry: CatalogEntry, criteria: FilterCriteria) -> bool:
    return not criteria.verified_only or entry.is_verified
