"""
Catalog discovery service.

Turns a snapshot of catalog entries (classified listings and vendors) plus a
set of user-selected facets into an ordered, paginated result list.
"""
