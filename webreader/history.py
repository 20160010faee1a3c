"""In-memory log of recently extracted pages, newest first."""

from __future__ import annotations

from typing import Iterator, List

from .models import SearchEntry


class RecentSearches:
    """Most-recent-first list of ``(url, title)`` entries.

    The log is not persisted; it starts empty on every run.
    """

    def __init__(self) -> None:
        self._entries: List[SearchEntry] = []

    def record(self, url: str, title: str) -> SearchEntry:
        entry = SearchEntry(url=url, title=title)
        self._entries.insert(0, entry)
        return entry

    def remove_by_title(self, title: str) -> bool:
        """Remove the first entry with ``title``. Returns whether one was found."""
        for idx, entry in enumerate(self._entries):
            if entry.title == title:
                del self._entries[idx]
                return True
        return False

    def __getitem__(self, index: int) -> SearchEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[SearchEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
