"""Client-side ordering and filtering of fetched catalog items."""

from collections.abc import Iterable
from typing import Literal, TypeVar

from skillshelf.types import Plugin, Skill

SortOption = Literal["relevance", "downloads", "stars"]

ItemT = TypeVar("ItemT", Plugin, Skill)


def sort_items(items: Iterable[ItemT], by: SortOption = "relevance") -> list[ItemT]:
    """Order items for display.

    ``"relevance"`` keeps the registry's own order; ``"downloads"`` and
    ``"stars"`` sort descending, keeping registry order among ties.
    """
    result = list(items)
    if by == "downloads":
        result.sort(key=lambda item: item.downloads, reverse=True)
    elif by == "stars":
        result.sort(key=lambda item: item.stars, reverse=True)
    elif by != "relevance":
        raise ValueError(f"Unknown sort option: {by!r}")
    return result


def filter_by_tag(items: Iterable[ItemT], tag: str | None) -> list[ItemT]:
    """Items carrying ``tag``; every item when ``tag`` is None."""
    if tag is None:
        return list(items)
    return [item for item in items if tag in item.tags]


def collect_tags(items: Iterable[Plugin | Skill]) -> list[str]:
    """Sorted, de-duplicated tags across ``items``."""
    return sorted({tag for item in items for tag in item.tags})
