from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "catalog.csv"


@dataclass(frozen=True)
class DiscoveryConfig:
    catalog_csv: Path = Path(os.getenv("DISCOVERY_CATALOG_CSV", str(_DEFAULT_CSV)))
    default_limit: int = int(os.getenv("DISCOVERY_DEFAULT_LIMIT", "20"))
    nearby_radius_km: float = float(os.getenv("DISCOVERY_NEARBY_RADIUS_KM", "10.0"))
    nearby_limit: int = int(os.getenv("DISCOVERY_NEARBY_LIMIT", "5"))
    # Kigali city centre
    fallback_lat: float = float(os.getenv("DISCOVERY_FALLBACK_LAT", "-1.9441"))
    fallback_lon: float = float(os.getenv("DISCOVERY_FALLBACK_LON", "30.0619"))
    utc_offset_hours: float = float(os.getenv("DISCOVERY_UTC_OFFSET_HOURS", "2"))
    cache_ttl: int = int(os.getenv("DISCOVERY_CACHE_TTL", "300"))
    price_step: int = 10000


DEFAULT_DISCOVERY_CONFIG = DiscoveryConfig()
