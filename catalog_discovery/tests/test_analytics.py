from __future__ import annotations

from fastapi.testclient import TestClient

from catalog_discovery.analytics.aggregator import compute_analytics
from catalog_discovery.analytics.store import clear_events, get_events, record_event
from catalog_discovery.app import app
from catalog_discovery.discovery.cache import clear_cache

client = TestClient(app)


def test_analytics_returns_empty_initially():
    clear_events()
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["empty_result_rate"] == 0.0


def test_analytics_tracks_search():
    clear_events()
    clear_cache()
    client.post("/discover", json={"categories": ["restaurant"], "sort": "relevance"})
    body = client.get("/analytics").json()
    assert body["total_searches"] == 1
    assert body["avg_response_time_ms"] >= 0
    assert body["sort_usage"] == {"relevance": 1}
    assert body["surface_usage"] == {"discover": 1}
    assert any(c["name"] == "restaurant" for c in body["top_categories"])


def test_analytics_tracks_multiple_searches():
    clear_events()
    client.post("/discover", json={"categories": ["restaurant"]})
    client.post("/discover", json={"categories": ["bakery"]})
    client.get("/nearby")
    body = client.get("/analytics").json()
    assert body["total_searches"] == 3
    assert body["surface_usage"] == {"discover": 2, "nearby": 1}
    assert body["fallback_origin_searches"] == 1


def test_analytics_facet_usage():
    clear_events()
    client.post("/discover", json={
        "categories": ["electronics"],
        "max_price": 300000,
        "query": "galaxy",
    })
    body = client.get("/analytics").json()
    assert body["facet_usage"]["categories"] == 100.0
    assert body["facet_usage"]["price"] == 100.0
    assert body["facet_usage"]["query"] == 100.0
    assert body["facet_usage"]["radius"] == 0.0


def test_analytics_counts_empty_results():
    clear_events()
    client.post("/discover", json={"query": "nothing matches this"})
    client.post("/discover", json={"categories": ["restaurant"]})
    body = client.get("/analytics").json()
    assert body["empty_result_rate"] == 50.0


def test_rejected_queries_are_not_recorded():
    clear_events()
    client.post("/discover", json={"radius_km": 5})
    assert get_events("search") == []


def test_compute_analytics_ignores_other_event_types():
    clear_events()
    record_event("reload", {"rows": 10})
    record_event("search", {"sort": "newest", "total_matches": 4, "response_time_ms": 2.0})
    result = compute_analytics(get_events())
    assert result["total_searches"] == 1
    assert result["avg_response_time_ms"] == 2.0
    assert get_events("reload")[0]["rows"] == 10
