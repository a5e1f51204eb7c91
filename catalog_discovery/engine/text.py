from __future__ import annotations

from .models import CatalogEntry


def searchable_text(entry: CatalogEntry) -> str:
    """Both language variants of title and description, casefolded."""
    return "\n".join(
        (entry.title_en, entry.title_ar, entry.description_en, entry.description_ar)
    ).casefold()


def matches(entry: CatalogEntry, query: str) -> bool:
    """
    Case-insensitive substring containment over the bilingual title and
    description. Only an empty query matches everything; the caller's text is
    matched as given, surrounding whitespace included.
    """
    if not query:
        return True
    return query.casefold() in searchable_text(entry)
