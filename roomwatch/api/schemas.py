"""Pydantic models for scraped listings and the diffs between runs."""

from pydantic import BaseModel, ConfigDict
from typing import List, Tuple


class Listing(BaseModel):
    """One rental unit as scraped from the listings page."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    price: str
    layout: str
    size: str

    def field_tuple(self) -> Tuple[str, str, str, str]:
        return (self.title, self.price, self.layout, self.size)


class ListingPair(BaseModel):
    """A current listing and its snapshot counterpart with the same id."""
    model_config = ConfigDict(frozen=True)

    new: Listing
    old: Listing

    def has_diff(self) -> bool:
        return self.new.field_tuple() != self.old.field_tuple()


class Diff(BaseModel):
    """Added, updated and removed listings between two runs."""
    model_config = ConfigDict(frozen=True)

    added: List[Listing] = []
    updated: List[ListingPair] = []
    removed: List[Listing] = []

    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)
