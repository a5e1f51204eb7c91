from __future__ import annotations

from datetime import datetime
from typing import Callable

from . import facets
from .models import CatalogEntry, FilterCriteria
from .text import matches

Predicate = Callable[[CatalogEntry], bool]


def compile_criteria(criteria: FilterCriteria, now: datetime) -> Predicate:
    """
    Build the conjunction of the structural gate, every facet and the text
    matcher for ``criteria``.

    Checks run cheapest first (boolean flags, set lookups, numeric ranges,
    then substring search); the order never changes the outcome.
    """
    now = facets.aware(now)
    since = facets.recency_start(criteria.recency, now)
    query = criteria.query

    def predicate(entry: CatalogEntry) -> bool:
        return (
            facets.is_listed(entry, now)
            and facets.delivery_matches(entry, criteria)
            and facets.negotiable_matches(entry, criteria)
            and facets.verified_matches(entry, criteria)
            and facets.category_matches(entry, criteria)
            and facets.kind_matches(entry, criteria)
            and facets.condition_matches(entry, criteria)
            and facets.city_matches(entry, criteria)
            and facets.price_matches(entry, criteria)
            and facets.recency_matches(entry, since)
            and matches(entry, query)
        )

    return predicate
