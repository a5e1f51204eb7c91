"""
Catalog discovery engine.

Responsibilities:
- Validate the per-query inputs (criteria, origin, radius, limit).
- Filter a candidate snapshot by conjunction of facets and free text.
- Measure great-circle distance from a caller-supplied origin.
- Order results with deterministic tie-break chains and paginate them.

Everything in this package is pure and synchronous: no I/O, no shared state.
"""
