from datetime import datetime

from catalog_discovery.engine.filters import compile_criteria
from catalog_discovery.engine.models import (
    Category,
    Condition,
    EntryKind,
    FilterCriteria,
    Recency,
)

NOW = datetime(2024, 3, 15, 8, 0, 0)


def _ids(entries, criteria, now=NOW):
    predicate = compile_criteria(criteria, now)
    return [e.id for e in entries if predicate(e)]


def test_price_range_keeps_entries_inside_band(make_entry):
    entries = [
        make_entry("cheap", price=5000),
        make_entry("pricey", price=15000),
        make_entry("middle", price=9000),
    ]
    criteria = FilterCriteria(min_price=8000, max_price=20000)
    assert _ids(entries, criteria) == ["pricey", "middle"]


def test_empty_criteria_keeps_exactly_the_listed_entries(make_entry):
    entries = [
        make_entry("a", category="books", condition="poor", city="Huye"),
        make_entry("b", is_active=False),
        make_entry("c", is_approved=False),
        make_entry("d", city=None, latitude=None, longitude=None),
        make_entry("e", category="restaurant", kind="vendor", price=0),
        make_entry("f", created_at=datetime(2019, 1, 1)),
    ]
    assert _ids(entries, FilterCriteria()) == ["a", "d", "e", "f"]


def test_facets_are_combined_with_and(make_entry):
    entries = [
        make_entry("all", category="furniture", condition="good", city="Kigali",
                   delivery_available=True, title_en="Oak table"),
        make_entry("wrong_city", category="furniture", condition="good", city="Huye",
                   delivery_available=True, title_en="Oak table"),
        make_entry("no_delivery", category="furniture", condition="good", city="Kigali",
                   title_en="Oak table"),
        make_entry("wrong_text", category="furniture", condition="good", city="Kigali",
                   delivery_available=True, title_en="Pine chair"),
    ]
    criteria = FilterCriteria(
        categories={Category.furniture},
        conditions={Condition.good},
        cities={"kigali"},
        delivery_required=True,
        query="oak",
    )
    assert _ids(entries, criteria) == ["all"]


def test_recency_today_excludes_yesterday(make_entry):
    entries = [
        make_entry("just_after_midnight", created_at=datetime(2024, 3, 15, 0, 1)),
        make_entry("just_before_midnight", created_at=datetime(2024, 3, 14, 23, 59)),
    ]
    criteria = FilterCriteria(recency=Recency.today)
    assert _ids(entries, criteria) == ["just_after_midnight"]


def test_gate_applies_regardless_of_facets(make_entry):
    hidden = make_entry("hidden", is_approved=False, title_en="Galaxy phone")
    assert _ids([hidden], FilterCriteria(query="galaxy")) == []


def test_vendor_feed_drops_listings_and_unverified_vendors(make_entry):
    entries = [
        make_entry("listing", is_verified=True),
        make_entry("verified_vendor", kind="vendor", category="restaurant", is_verified=True),
        make_entry("unverified_vendor", kind="vendor", category="restaurant"),
    ]
    criteria = FilterCriteria(kinds={EntryKind.vendor}, verified_only=True)
    assert _ids(entries, criteria) == ["verified_vendor"]
