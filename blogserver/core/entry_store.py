"""Entry Store — in-memory, ordered collection of blog entries.

Invariants:
    - Ids are unique and strictly increasing in creation order: max(ids) + 1, or 1 when empty
    - Entries are ordered newest-first after construction and after every add
    - Equal dates keep their relative insertion order (stable sort)
    - add() runs id assignment, insertion and re-sort under one lock; observers
      never see a half-applied add
    - Readers receive copies; the internal list never escapes

Design Decisions:
    - Single RLock over a reader/writer lock: snapshots are short list copies,
      contention is dominated by template rendering done outside the lock
    - RLock (not Lock) so exclusive() holders can still call snapshot()
    - Pure in-memory: persistence lives in infrastructure/persistence.py
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from blogserver.core.entry import Entry
from blogserver.core.errors import EntryValidationError


def _newest_first(entries: Iterable[Entry]) -> list[Entry]:
    # list.sort is stable with reverse=True
    return sorted(entries, key=lambda e: e.date, reverse=True)


class EntryStore:
    """Thread-safe ordered collection of entries."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._lock = threading.RLock()
        self._entries: list[Entry] = _newest_first(entries)

    def add(self, title: str, content: str, now: datetime | None = None) -> Entry:
        """Create, insert and return a new entry with the next id."""
        if not title or not title.strip():
            raise EntryValidationError("title")
        if not content or not content.strip():
            raise EntryValidationError("content")
        date = now or datetime.now(timezone.utc)

        with self._lock:
            entry = Entry(
                id=self._next_id(),
                title=title,
                content=content,
                date=date,
            )
            self._entries.append(entry)
            self._entries = _newest_first(self._entries)
        return entry

    def all_by_date(self) -> list[Entry]:
        """Snapshot of all entries, newest first."""
        with self._lock:
            return list(self._entries)

    def snapshot(self) -> list[Entry]:
        """Consistent copy for persistence."""
        return self.all_by_date()

    @property
    def latest_id(self) -> int:
        with self._lock:
            return max((e.id for e in self._entries), default=0)

    @contextmanager
    def exclusive(self) -> Iterator["EntryStore"]:
        """Hold the store lock; no add can run until the block exits."""
        with self._lock:
            yield self

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _next_id(self) -> int:
        # Caller holds the lock. Entries are date-ordered, so the newest
        # entry does not necessarily carry the highest id.
        return max((e.id for e in self._entries), default=0) + 1
