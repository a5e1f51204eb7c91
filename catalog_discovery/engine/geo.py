from __future__ import annotations

import math

from .models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """
    Great-circle distance between two coordinates using the haversine formula.

    Symmetric, zero exactly when ``a == b``, and finite for every valid pair
    including antipodal points.
    """
    if a == b:
        return 0.0

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlon = math.radians(b.lon - a.lon)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push h marginally outside [0, 1].
    h = min(1.0, max(0.0, h))

    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c
