"""Catalog item metadata."""
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogItem:
    """Statically defined purchasable audiobook."""
    id: str
    title: str
    author: str
    cover_reference: str  # remote URL or "asset:" bundle reference
    total_duration_seconds: float
