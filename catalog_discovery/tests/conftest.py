"""Shared test fixtures."""
from __future__ import annotations

from datetime import datetime

import pytest

from catalog_discovery.engine.models import CatalogEntry


@pytest.fixture
def make_entry():
    """Factory for listed catalog entries; keyword overrides win."""

    def _make(entry_id: str, **overrides) -> CatalogEntry:
        fields = {
            "id": entry_id,
            "category": "electronics",
            "title_en": f"Item {entry_id}",
            "price": 1000.0,
            "created_at": datetime(2024, 3, 1, 12, 0, 0),
            "city": "Kigali",
            "is_active": True,
            "is_approved": True,
        }
        fields.update(overrides)
        return CatalogEntry(**fields)

    return _make
