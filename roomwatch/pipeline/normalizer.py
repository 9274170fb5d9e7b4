"""Text cleaning for scraped listing fields.

The listings page pads its cells with ASCII spaces, ideographic
(full-width) spaces, tabs and newlines. Only the edges are cleaned:
inner whitespace is part of the display string.
"""

from typing import Iterable, Optional


def clean_text(raw: Optional[str]) -> str:
    """Strip leading and trailing whitespace, including full-width spaces."""
    if not raw:
        return ""
    return raw.strip()


def join_fragments(fragments: Iterable[str]) -> str:
    """Clean each fragment and join them with a single space."""
    return " ".join(clean_text(f) for f in fragments)
