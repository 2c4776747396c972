"""Static audiobook catalog and lookups."""
from typing import Iterable, List, Optional

from audioshelf.models.catalog import CatalogItem

SAMPLE_CATALOG: List[CatalogItem] = [
    CatalogItem(
        id="a1",
        title="The Art of Flutter",
        author="Jane Doe",
        cover_reference="https://covers.openlibrary.org/b/id/13518277-L.jpg",
        total_duration_seconds=5380.0,
    ),
    CatalogItem(
        id="a2",
        title="Mysteries of the Mind",
        author="John Smith",
        cover_reference="https://covers.openlibrary.org/b/id/13518327-L.jpg",
        total_duration_seconds=6450.0,
    ),
    CatalogItem(
        id="a3",
        title="Minimalism 101",
        author="Sara Lee",
        cover_reference="https://covers.openlibrary.org/b/id/13518667-L.jpg",
        total_duration_seconds=4870.0,
    ),
]


def get_item_by_id(catalog: Iterable[CatalogItem], item_id: str) -> Optional[CatalogItem]:
    """Return catalog item by id or None."""
    for item in catalog:
        if item.id == item_id:
            return item
    return None


def items_with_ids(catalog: Iterable[CatalogItem], ids: Iterable[str]) -> List[CatalogItem]:
    """Return catalog items whose id is in ids, in catalog order."""
    wanted = set(ids)
    return [item for item in catalog if item.id in wanted]
