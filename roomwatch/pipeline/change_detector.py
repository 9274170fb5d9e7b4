"""Change detection between crawl runs.

Compares the listings scraped in this run against the snapshot saved by
the previous one, identifying added, updated, and removed listings. Field
values are compared verbatim; any trimming happens during extraction.
"""

from typing import Dict, List, Optional

from roomwatch.api.schemas import Diff, Listing, ListingPair


def detect_changes(current: List[Listing], previous: List[Listing]) -> Optional[Diff]:
    """Diff the current listings against the previous snapshot.

    Args:
        current: Listings from this run's scrape, in page order.
        previous: Listings loaded from the snapshot.

    Returns:
        A Diff, or None when nothing was added, updated, or removed.
    """
    # Duplicate ids in the snapshot: the last one wins.
    remaining: Dict[str, Listing] = {listing.id: listing for listing in previous}

    added: List[Listing] = []
    updated: List[ListingPair] = []

    for listing in current:
        old = remaining.pop(listing.id, None)
        if old is None:
            added.append(listing)
            continue
        pair = ListingPair(new=listing, old=old)
        if pair.has_diff():
            updated.append(pair)

    diff = Diff(added=added, updated=updated, removed=list(remaining.values()))
    if diff.is_empty():
        return None
    return diff


def build_change_summary(diff: Optional[Diff]) -> Dict[str, int]:
    """Summarize a diff into counts for logging."""
    if diff is None:
        diff = Diff()
    return {
        "added_count": len(diff.added),
        "updated_count": len(diff.updated),
        "removed_count": len(diff.removed),
        "total_count": len(diff.added) + len(diff.updated) + len(diff.removed),
    }
