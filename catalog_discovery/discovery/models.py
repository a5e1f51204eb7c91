from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from ..engine.models import Category, Condition, EntryKind, Recency, SortMode


class OriginIn(BaseModel):
    lat: float
    lon: float


class DiscoverRequest(BaseModel):
    categories: list[Category] = Field(
        default_factory=list, description="Empty means every category"
    )
    kinds: list[EntryKind] = Field(
        default_factory=list, description="listing, vendor; empty means both"
    )
    min_price: float = Field(default=0.0, ge=0.0)
    max_price: float | None = Field(
        default=None, ge=0.0, description="None means no upper bound"
    )
    conditions: list[Condition] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)
    recency: Recency = Recency.all
    delivery_required: bool = False
    negotiable_only: bool = False
    verified_only: bool = False
    query: str = Field(default="", max_length=200)
    sort: SortMode = SortMode.newest
    origin: OriginIn | None = None
    radius_km: float | None = Field(default=None, gt=0.0)
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class EntryOut(BaseModel):
    id: str
    kind: EntryKind
    category: Category
    title_en: str
    title_ar: str
    description_en: str
    description_ar: str
    price: float
    discounted_price: float | None
    effective_price: float
    condition: Condition | None
    city: str | None
    latitude: float | None
    longitude: float | None
    created_at: datetime
    is_featured: bool
    is_verified: bool
    delivery_available: bool
    is_negotiable: bool
    rating: float
    review_count: int


class DiscoveryItem(BaseModel):
    entry: EntryOut
    distance_km: float | None = None


class DiscoveryResponse(BaseModel):
    results: list[DiscoveryItem]
    total_matches: int
    limit: int
    offset: int = 0
    origin: OriginIn | None = None
    origin_is_fallback: bool = False
