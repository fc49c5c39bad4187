"""Blog Runtime — owns the Entry Store and drives its load/save lifecycle.

Invariants:
    - Lifecycle: UNINITIALIZED -> LOADED -> RUNNING <-> SAVED -> TERMINATED
    - start() runs once; StoreDecodeError always aborts it, StoreNotFoundError
      aborts it only under MissingDataPolicy.FAIL
    - Every save snapshots the store under its exclusive lock, so no save
      reads a store mid-add
    - Saves are serialized by a save lock and bounded by save_timeout_seconds
    - A save failure is logged and re-raised, never swallowed
    - shutdown() never writes a store that was not loaded: a failed start
      must not overwrite the file it could not read

Design Decisions:
    - Save runs on a single worker thread so the caller can time out without
      killing the write; a late write still completes atomically
    - Unsaved counter is updated under the store lock, alongside the add
      it counts, so saves report exactly what they persisted
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from pathlib import Path

from blogserver.config import Settings
from blogserver.core.domain_types import LifecycleState, MissingDataPolicy
from blogserver.core.entry import Entry
from blogserver.core.entry_store import EntryStore
from blogserver.core.errors import StoreNotFoundError, StoreWriteError
from blogserver.infrastructure.persistence import load_store, write_entries

logger = logging.getLogger(__name__)


class BlogRuntime:
    """Entry Store plus its persistence lifecycle."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.data_file = Path(settings.data_file)
        self.store = EntryStore()
        self._state = LifecycleState.UNINITIALIZED
        self._unsaved = 0
        self._state_lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="blog-save",
        )

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def unsaved_count(self) -> int:
        with self.store.exclusive():
            return self._unsaved

    @property
    def dirty(self) -> bool:
        return self.unsaved_count > 0

    def start(self) -> None:
        """Load persisted entries and enter RUNNING."""
        if self._state is not LifecycleState.UNINITIALIZED:
            raise RuntimeError(f"Runtime already started (state={self._state.value})")
        try:
            self.store = load_store(self.data_file)
        except StoreNotFoundError:
            if self.settings.missing_data_policy is MissingDataPolicy.FAIL:
                logger.critical(
                    f"Entry file {self.data_file} not found and policy is 'fail'",
                    extra={"path": str(self.data_file), "error_code": "STORE_NOT_FOUND"},
                )
                raise
            logger.warning(
                f"Entry file {self.data_file} not found, starting with an empty blog",
                extra={"path": str(self.data_file)},
            )
            self.store = EntryStore()
        self._set_state(LifecycleState.LOADED)

        if self.settings.save_on_submit:
            logger.info("Entries are saved after every submission")
        else:
            logger.warning(
                "Entries are saved on shutdown only; a hard kill loses "
                "everything submitted since the last save",
                extra={"path": str(self.data_file)},
            )
        self._set_state(LifecycleState.RUNNING)

    def add_entry(self, title: str, content: str) -> Entry:
        """Add an entry and, in save-on-submit mode, persist immediately."""
        self._require_serving()
        with self.store.exclusive():
            entry = self.store.add(title, content)
            self._unsaved += 1
            self._set_state(LifecycleState.RUNNING)
        logger.info(
            f"Created entry {entry.id}",
            extra={"entry_id": entry.id},
        )
        if self.settings.save_on_submit:
            self.save()
        return entry

    def save(self) -> None:
        """Persist the store, waiting at most save_timeout_seconds."""
        future = self._executor.submit(self._save_now)
        try:
            future.result(timeout=self.settings.save_timeout_seconds)
        except FutureTimeout:
            logger.error(
                f"Saving entries timed out after {self.settings.save_timeout_seconds}s",
                extra={
                    "path": str(self.data_file),
                    "error_code": "STORE_WRITE_FAILURE",
                    "unsaved": self.unsaved_count,
                },
            )
            raise StoreWriteError(str(self.data_file), "timed out")

    def shutdown(self) -> None:
        """Final save, then TERMINATED. Raises if the final save fails."""
        if self._state is LifecycleState.TERMINATED:
            return
        if self._state is LifecycleState.UNINITIALIZED:
            logger.warning("Shutting down before entries were loaded; nothing to save")
            self._terminate()
            return

        logger.info("Shutdown requested, saving entries...")
        try:
            self.save()
        except StoreWriteError:
            unsaved = self.unsaved_count
            logger.critical(
                f"Final save failed; {unsaved} unsaved entries will be lost",
                extra={
                    "path": str(self.data_file),
                    "error_code": "STORE_WRITE_FAILURE",
                    "unsaved": unsaved,
                },
            )
            self._terminate()
            raise
        self._terminate()

    def _save_now(self) -> None:
        with self._save_lock:
            with self.store.exclusive():
                entries = self.store.snapshot()
                pending = self._unsaved
            write_entries(entries, self.data_file)
            with self.store.exclusive():
                self._unsaved -= pending
                if self._unsaved == 0:
                    self._set_state(LifecycleState.SAVED)

    def _require_serving(self) -> None:
        if self._state not in (LifecycleState.RUNNING, LifecycleState.SAVED):
            raise RuntimeError(f"Runtime is not serving (state={self._state.value})")

    def _set_state(self, state: LifecycleState) -> None:
        with self._state_lock:
            if self._state is LifecycleState.TERMINATED:
                return
            self._state = state
        logger.debug(f"Runtime state -> {state.value}", extra={"state": state.value})

    def _terminate(self) -> None:
        self._set_state(LifecycleState.TERMINATED)
        self._executor.shutdown(wait=False)
