from __future__ import annotations

from collections import Counter
from typing import Any

_FACETS = (
    "categories",
    "kinds",
    "conditions",
    "cities",
    "price",
    "recency",
    "delivery",
    "negotiable",
    "verified",
    "query",
    "radius",
)


def _facets_used(search: dict[str, Any]) -> list[str]:
    used = []
    if search.get("categories"):
        used.append("categories")
    if search.get("kinds"):
        used.append("kinds")
    if search.get("conditions"):
        used.append("conditions")
    if search.get("cities"):
        used.append("cities")
    if search.get("price_filtered"):
        used.append("price")
    if search.get("recency", "all") != "all":
        used.append("recency")
    if search.get("delivery_required"):
        used.append("delivery")
    if search.get("negotiable_only"):
        used.append("negotiable")
    if search.get("verified_only"):
        used.append("verified")
    if search.get("query"):
        used.append("query")
    if search.get("radius_km") is not None:
        used.append("radius")
    return used


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    total = len(searches)

    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    category_counter: Counter[str] = Counter()
    for s in searches:
        for c in s.get("categories", []) or []:
            category_counter[c] += 1
    top_categories = [{"name": n, "count": c} for n, c in category_counter.most_common(10)]

    sort_usage = dict(Counter(s.get("sort", "unknown") for s in searches))
    surface_usage = dict(Counter(s.get("surface", "unknown") for s in searches))

    facet_counts = {facet: 0 for facet in _FACETS}
    for s in searches:
        for facet in _facets_used(s):
            facet_counts[facet] += 1
    facet_usage = {
        k: round(v / total * 100, 1) if total else 0.0
        for k, v in facet_counts.items()
    }

    # Searches that came back empty are worth watching for over-narrow facets
    empty = sum(1 for s in searches if s.get("total_matches", 0) == 0)
    fallback = sum(1 for s in searches if s.get("origin_is_fallback"))

    cache_hits = sum(1 for s in searches if s.get("cache_hit"))

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_categories": top_categories,
        "sort_usage": sort_usage,
        "surface_usage": surface_usage,
        "facet_usage": facet_usage,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "fallback_origin_searches": fallback,
        "cache_stats": {
            "hits": cache_hits,
            "misses": total - cache_hits,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
