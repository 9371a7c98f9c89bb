"""The user's "watch later" list."""

from __future__ import annotations

from functools import singledispatch

from .models import CatalogueRecord, Recommendation, SavedItem, WatchCandidate

ADDED_FROM_LIST_REASON = "Added from list"


@singledispatch
def to_saved_item(candidate: WatchCandidate) -> SavedItem:
    """Convert a displayable title into the canonical saved shape."""

    raise TypeError(f"Cannot save objects of type {type(candidate).__name__}")


@to_saved_item.register
def _from_record(candidate: CatalogueRecord) -> SavedItem:
    return SavedItem(
        title=candidate.title,
        kind=candidate.kind.value,
        reason=candidate.description or ADDED_FROM_LIST_REASON,
        year=str(candidate.release_year),
        genre=candidate.listed_in,
    )


@to_saved_item.register
def _from_recommendation(candidate: Recommendation) -> SavedItem:
    return SavedItem(
        title=candidate.title,
        kind=candidate.kind or "Movie",
        similarity_score=candidate.similarity_score or 100.0,
        reason=candidate.reason or ADDED_FROM_LIST_REASON,
        year=candidate.year,
        genre=candidate.genre,
        poster_url=candidate.poster_url,
        trailer_url=candidate.trailer_url,
    )


@to_saved_item.register
def _from_saved(candidate: SavedItem) -> SavedItem:
    return candidate


class SavedItemsStore:
    """Titles kept for later viewing, unique by title."""

    def __init__(self) -> None:
        self._items: dict[str, SavedItem] = {}

    def toggle(self, candidate: WatchCandidate) -> bool:
        """Add or remove ``candidate``; return whether it is now saved."""

        title = candidate.title
        if title in self._items:
            del self._items[title]
            return False
        self._items[title] = to_saved_item(candidate)
        return True

    def is_saved(self, title: str) -> bool:
        return title in self._items

    def get(self, title: str) -> SavedItem | None:
        return self._items.get(title)

    @property
    def items(self) -> list[SavedItem]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
