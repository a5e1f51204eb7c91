"""
Discovery service layer.

Responsibilities:
- Load the catalog snapshot and hand coarse candidate sets to the engine.
- Translate API requests into FilterCriteria / GeoPoint values.
- Apply the visible fallback origin for "near you" queries.
- Cache results and record search analytics.
"""
