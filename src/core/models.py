# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

DEFAULT_ARTIST = "Unknown Artist"


@dataclass(frozen=True)
class Item:
    id: str
    title: str
    artist: str = DEFAULT_ARTIST
    source_ref: str = ""              # path or URL; empty -> synthesized tone
    accent_color: Optional[str] = None  # cover colour, only the UI reads it

    def __post_init__(self):
        if not self.artist:
            object.__setattr__(self, "artist", DEFAULT_ARTIST)
        if self.source_ref is None:
            object.__setattr__(self, "source_ref", "")

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        source = data.get("source_ref") or data.get("audioUrl") or data.get("path") or ""
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            artist=str(data.get("artist") or DEFAULT_ARTIST),
            source_ref=str(source),
            accent_color=data.get("accent_color") or data.get("color"),
        )

    @property
    def display_name(self) -> str:
        return f"{self.title} — {self.artist}"


class Catalog:
    """
    Ordered, fixed sequence of items with a wrapping cursor.

    The cursor is always a valid index while the catalog is non-empty;
    navigation on an empty catalog returns None instead of failing.
    """

    def __init__(self, items: Iterable[Item] = ()):
        self._items: tuple[Item, ...] = tuple(items)
        self.cursor = 0

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def set_cursor(self, i: int) -> None:
        n = len(self._items)
        if not n:
            return
        # always lands in [0, n), negative i included
        self.cursor = ((int(i) % n) + n) % n

    def current(self) -> Item | None:
        if not self._items:
            return None
        return self._items[self.cursor]

    def next(self) -> Item | None:
        self.set_cursor(self.cursor + 1)
        return self.current()

    def previous(self) -> Item | None:
        self.set_cursor(self.cursor - 1)
        return self.current()

    def find_by_id(self, item_id: str) -> Item | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def index_of(self, item_id: str) -> int | None:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return None
