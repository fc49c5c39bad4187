"""Entry — immutable blog post record.

Invariants:
    - id is assigned by EntryStore, never by callers
    - date is timezone-aware
    - Never mutated after creation (frozen)
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Entry:
    """A single blog post."""

    id: int
    title: str
    content: str
    date: datetime
