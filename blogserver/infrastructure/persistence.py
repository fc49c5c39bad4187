"""Persistence Layer — JSON file load/save for the Entry Store.

Invariants:
    - load_store is read-only: never writes, truncates or renames the source
    - load_store either returns a complete store or raises; no partial loads
    - save_store writes a temp file in the target directory, fsyncs, then
      os.replace()s it over the target; readers see the old or the new file
    - On any save failure the temp file is removed and StoreWriteError raised

Design Decisions:
    - Pydantic models own the JSON shape (schemas/entry.py), not this module
    - Temp file in the same directory: os.replace is only atomic within a filesystem
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from blogserver.core.entry import Entry
from blogserver.core.entry_store import EntryStore
from blogserver.core.errors import (
    StoreDecodeError, StoreNotFoundError, StoreWriteError,
)
from blogserver.schemas.entry import EntryRecord, StoreDocument

logger = logging.getLogger(__name__)


def load_store(path: str | Path) -> EntryStore:
    """Build an EntryStore from the JSON file at path."""
    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise StoreNotFoundError(str(path))
    except OSError as e:
        raise StoreDecodeError(str(path), f"unreadable: {e.strerror or e}")

    try:
        document = StoreDocument.model_validate_json(raw)
    except ValidationError as e:
        raise StoreDecodeError(
            str(path), f"{e.error_count()} validation error(s)",
        ) from e

    store = EntryStore(r.to_entry() for r in document.entries)
    logger.info(
        f"Loaded {len(store)} entries from {path}",
        extra={"path": str(path)},
    )
    return store


def save_store(store: EntryStore, path: str | Path) -> None:
    """Atomically replace the file at path with the store's contents."""
    write_entries(store.snapshot(), path)


def write_entries(entries: Iterable[Entry], path: str | Path) -> None:
    """Atomically replace the file at path with entries, in the given order."""
    path = Path(path)
    document = StoreDocument(
        entries=[EntryRecord.from_entry(e) for e in entries],
    )
    payload = document.model_dump_json(indent=2)

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        logger.error(
            f"Failed to save entries to {path}: {e}",
            extra={"path": str(path), "error_code": "STORE_WRITE_FAILURE"},
        )
        raise StoreWriteError(str(path), e.strerror or str(e)) from e

    logger.info(
        f"Saved {len(document.entries)} entries to {path}",
        extra={"path": str(path)},
    )
