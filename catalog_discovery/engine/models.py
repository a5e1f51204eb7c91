from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import InvalidCoordinate, InvalidCriteria


class Category(str, Enum):
    # Classifieds
    electronics = "electronics"
    furniture = "furniture"
    clothing = "clothing"
    toys = "toys"
    home_garden = "home_garden"
    vehicles = "vehicles"
    services = "services"
    books = "books"
    food_kitchen = "food_kitchen"
    # Vendor business types
    restaurant = "restaurant"
    grocery = "grocery"
    bakery = "bakery"
    supermarket = "supermarket"
    party_supplies = "party_supplies"
    events = "events"
    other = "other"


class Condition(str, Enum):
    new = "new"
    like_new = "like_new"
    good = "good"
    fair = "fair"
    poor = "poor"


class Recency(str, Enum):
    all = "all"
    today = "today"
    week = "week"
    month = "month"


class SortMode(str, Enum):
    newest = "newest"
    oldest = "oldest"
    price_asc = "price_asc"
    price_desc = "price_desc"
    relevance = "relevance"
    distance = "distance"


class EntryKind(str, Enum):
    listing = "listing"
    vendor = "vendor"


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        lat, lon = self.lat, self.lon
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidCoordinate(lat, lon)
        if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
            raise InvalidCoordinate(lat, lon)


class CatalogEntry(BaseModel):
    """A listing or vendor record, read-only for the duration of a query."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: EntryKind = EntryKind.listing
    category: Category
    title_en: str = ""
    title_ar: str = ""
    description_en: str = ""
    description_ar: str = ""
    price: float = Field(..., ge=0.0)
    discounted_price: float | None = Field(default=None, ge=0.0)
    condition: Condition | None = None
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime
    expires_at: datetime | None = None
    is_featured: bool = False
    is_verified: bool = False
    is_active: bool = False
    is_approved: bool = False
    delivery_available: bool = False
    is_negotiable: bool = False
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _discount_not_above_price(self) -> "CatalogEntry":
        if self.discounted_price is not None and self.discounted_price > self.price:
            raise ValueError("discounted_price must not exceed price")
        return self

    @property
    def effective_price(self) -> float:
        if self.discounted_price is not None:
            return self.discounted_price
        return self.price

    @property
    def location(self) -> GeoPoint | None:
        """Coordinate of the entry, or None when it cannot be resolved."""
        if self.latitude is None or self.longitude is None:
            return None
        try:
            return GeoPoint(self.latitude, self.longitude)
        except InvalidCoordinate:
            return None


def _token_set(values: Iterable, enum_cls: type[Enum], facet: str) -> frozenset:
    try:
        return frozenset(enum_cls(v) for v in values)
    except ValueError as exc:
        raise InvalidCriteria(f"unknown {facet} token ({exc})") from exc


@dataclass(frozen=True)
class FilterCriteria:
    """
    Immutable per-query facet selection.

    An empty set for categories, kinds, conditions or cities means "no
    filtering on that facet", never "reject everything".
    """

    categories: frozenset[Category] = frozenset()
    kinds: frozenset[EntryKind] = frozenset()
    min_price: float = 0.0
    max_price: float = math.inf
    conditions: frozenset[Condition] = frozenset()
    cities: frozenset[str] = frozenset()
    recency: Recency = Recency.all
    delivery_required: bool = False
    negotiable_only: bool = False
    verified_only: bool = False
    query: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "categories", _token_set(self.categories, Category, "category")
        )
        object.__setattr__(self, "kinds", _token_set(self.kinds, EntryKind, "kind"))
        object.__setattr__(
            self, "conditions", _token_set(self.conditions, Condition, "condition")
        )
        object.__setattr__(
            self,
            "cities",
            frozenset(c.strip().casefold() for c in self.cities if c and c.strip()),
        )
        try:
            object.__setattr__(self, "recency", Recency(self.recency))
        except ValueError as exc:
            raise InvalidCriteria(f"unknown recency token {self.recency!r}") from exc
        object.__setattr__(self, "query", self.query or "")

        if self.min_price < 0 or self.max_price < 0:
            raise InvalidCriteria("price bounds must be non-negative")
        # Also rejects NaN bounds.
        if not (self.min_price <= self.max_price):
            raise InvalidCriteria(
                f"min_price ({self.min_price}) is greater than max_price ({self.max_price})"
            )


@dataclass(frozen=True)
class RankedItem:
    entry: CatalogEntry
    distance_km: float | None = None


@dataclass(frozen=True)
class RankedResult:
    """Ordered page of results plus the number of matches before paging."""

    items: tuple[RankedItem, ...] = field(default_factory=tuple)
    total_matches: int = 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[RankedItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> RankedItem:
        return self.items[index]

    @property
    def entries(self) -> list[CatalogEntry]:
        return [item.entry for item in self.items]
