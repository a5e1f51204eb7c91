from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd
from pydantic import ValidationError

from ..engine.models import CatalogEntry
from .cache import invalidate
from .config import DEFAULT_DISCOVERY_CONFIG

logger = logging.getLogger(__name__)

_BOOL_COLUMNS = [
    "is_featured",
    "is_verified",
    "is_active",
    "is_approved",
    "delivery_available",
    "is_negotiable",
]
_TEXT_COLUMNS = ["title_en", "title_ar", "description_en", "description_ar"]

_df: pd.DataFrame | None = None
_entries: dict[str, CatalogEntry] | None = None


def _load(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"id": str})

    # Missing flags count as False so they fail the gate/facet needing them
    for col in _BOOL_COLUMNS:
        if col not in df.columns:
            df[col] = False
        df[col] = df[col].fillna(False).astype(str).str.strip().str.lower() == "true"

    for col in _TEXT_COLUMNS:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].fillna("").astype(str)

    df["category"] = df["category"].fillna("other").str.strip().str.lower()

    logger.info("Loaded catalog snapshot: %d rows from %s", len(df), path)
    return df


def _to_entries(df: pd.DataFrame) -> dict[str, CatalogEntry]:
    records = df.astype(object).where(df.notna(), None)
    entries: dict[str, CatalogEntry] = {}
    for record in records.to_dict("records"):
        try:
            entry = CatalogEntry.model_validate(record)
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed catalog row %s: %s",
                record.get("id"), exc.errors()[0].get("msg"),
            )
            continue
        entries[entry.id] = entry
    return entries


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory catalog DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load(DEFAULT_DISCOVERY_CONFIG.catalog_csv)
    return _df


def _get_entries() -> dict[str, CatalogEntry]:
    global _entries
    if _entries is None:
        _entries = _to_entries(get_dataframe())
    return _entries


def get_candidates(categories: Iterable[str] | None = None) -> list[CatalogEntry]:
    """
    Coarse candidate query: active, approved entries of the given categories
    (all categories when none are given). Fine-grained faceting is left to the
    engine.
    """
    df = get_dataframe()
    mask = df["is_active"] & df["is_approved"]
    wanted = [c.strip().lower() for c in categories or [] if c and c.strip()]
    if wanted:
        mask = mask & df["category"].isin(wanted)

    entries = _get_entries()
    return [entries[i] for i in df.loc[mask, "id"] if i in entries]


def get_cities() -> list[str]:
    df = get_dataframe()
    if "city" not in df.columns:
        return []
    return sorted(df["city"].dropna().str.strip().unique().tolist())


def load_snapshot(path: Path) -> None:
    """Replace the in-memory snapshot with the catalog at ``path``."""
    global _df, _entries
    _df = _load(path)
    _entries = None
    invalidate()


def reset() -> None:
    global _df, _entries
    _df = None
    _entries = None
    invalidate()
