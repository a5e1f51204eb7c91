"""In-memory search analytics for the discovery service."""
