"""
In-memory change ledger mirrored to a JSON file.

The ledger is the only shared mutable state in the service. Route handlers
run on a worker thread pool, so every read-modify-persist sequence holds
the ledger lock until the file write has finished.
"""

import logging
import threading
import time
from typing import List, Optional

from feedback_proxy.exceptions import ChangeNotFound, CorruptState, PersistenceFailure
from feedback_proxy.models import Change
from feedback_proxy.store import ChangeStore


logger = logging.getLogger(__name__)


def _is_numeric_id(change_id: str) -> bool:
    """True for ids made of ASCII digits only, the form next_id() hands out."""
    return change_id.isascii() and change_id.isdigit()


class Ledger:
    """
    Ordered collection of applied changes.

    Insertion order is kept and used as display order. The in-memory list is
    authoritative for the life of the process: a failed file write is logged
    and the mutation stands.
    """

    def __init__(self, store: ChangeStore):
        self.store = store
        self._changes: List[Change] = []
        self._lock = threading.RLock()
        self._last_id = 0

    def load(self) -> None:
        """Replace the in-memory ledger with the stored one. Never raises on bad data."""
        with self._lock:
            try:
                changes = self.store.load()
            except CorruptState as e:
                logger.error(f"Error loading local changes, starting empty: {e}")
                changes = []

            if changes is None:
                logger.info(
                    f"No existing local changes file at {self.store.path}, starting empty"
                )
                changes = []
            else:
                logger.info(f"Loaded {len(changes)} local changes from {self.store.path}")

            self._last_id = max(
                (int(c.id) for c in changes if _is_numeric_id(c.id)),
                default=0
            )
            self._changes = self._rekey_duplicates(changes)

    def next_id(self) -> str:
        """
        Allocate a change id.

        Ids are millisecond timestamps, bumped past the last id handed out so
        that two changes in the same millisecond still get distinct ids.
        """
        with self._lock:
            now_ms = int(time.time() * 1000)
            self._last_id = max(now_ms, self._last_id + 1)
            return str(self._last_id)

    def append(self, change: Change) -> None:
        """Add a change at the end and persist the whole ledger."""
        with self._lock:
            if self._index_of(change.id) is not None:
                raise ValueError(f"Duplicate change id: {change.id}")
            self._changes.append(change)
            self._persist()

    def find_by_id(self, change_id: str) -> Optional[Change]:
        with self._lock:
            index = self._index_of(change_id)
            return self._changes[index] if index is not None else None

    def get(self, change_id: str) -> Change:
        """Like find_by_id, but raises ChangeNotFound for unknown ids."""
        change = self.find_by_id(change_id)
        if change is None:
            raise ChangeNotFound(change_id)
        return change

    def remove(self, change_id: str) -> bool:
        """
        Drop a change and persist the whole ledger.

        Returns False, without writing, if the id is not in the ledger.
        """
        with self._lock:
            index = self._index_of(change_id)
            if index is None:
                logger.warning(f"Cannot remove change {change_id}: not in ledger")
                return False
            del self._changes[index]
            self._persist()
            return True

    def list(self) -> List[Change]:
        """Snapshot of all changes in insertion order."""
        with self._lock:
            return list(self._changes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._changes)

    def _rekey_duplicates(self, changes: List[Change]) -> List[Change]:
        """
        Give fresh ids to stored changes whose id was already taken.

        Files written by older versions can hold colliding ids. The first
        record keeps its id; the repaired ledger is written back.
        """
        seen = set()
        repaired = []
        for change in changes:
            if change.id in seen:
                new_id = self.next_id()
                logger.warning(f"Duplicate change id {change.id} in ledger file, re-keyed to {new_id}")
                change = change.model_copy(update={"id": new_id})
            seen.add(change.id)
            repaired.append(change)

        if repaired != changes:
            self._changes = repaired
            self._persist()
        return repaired

    def _index_of(self, change_id: str) -> Optional[int]:
        for i, change in enumerate(self._changes):
            if change.id == change_id:
                return i
        return None

    def _persist(self) -> None:
        try:
            self.store.save(self._changes)
        except PersistenceFailure as e:
            logger.error(f"Error saving local changes: {e}")
