"""
Rollback of recorded changes.

Each change type has exactly one inverse remote call:

    create      -> delete the created note
    update      -> put the original representation back
    delete      -> re-create the note from its original representation
    tag_add     -> remove the tag
    tag_remove  -> add the tag back

Re-creating a deleted note gives it a new remote id. Other changes that
still reference the old id are left as they are.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any

from feedback_proxy.exceptions import IrreversibleChange
from feedback_proxy.ledger import Ledger
from feedback_proxy.models import Change, ChangeType
from feedback_proxy.protocols import FeedbackService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollbackResult:
    """The change that was undone and the response of the inverse call."""
    change: Change
    response: Any


class RollbackExecutor:
    """Undoes ledger changes against the feedback service."""

    def __init__(self, client: FeedbackService, ledger: Ledger):
        self.client = client
        self.ledger = ledger
        # Held from lookup to removal so a change is never reversed twice.
        self._lock = threading.Lock()

    def rollback(self, change_id: str) -> RollbackResult:
        """
        Reverse a change and drop it from the ledger.

        Raises:
            ChangeNotFound: If the id is not in the ledger (never recorded, or
                already rolled back). No remote call is made.
            RemoteCallFailure: If the inverse call fails. The change stays in
                the ledger and the rollback can be retried.
            IrreversibleChange: If the change has no remote note id to act on
                (ledgers written before ids were required on create). The
                change stays in the ledger.
        """
        with self._lock:
            change = self.ledger.get(change_id)
            if change.remote_id is None and change.type != ChangeType.DELETE:
                raise IrreversibleChange(change_id, "no remote note id recorded")
            response = self._apply_inverse(change)
            self.ledger.remove(change_id)

        logger.info(f"Rolled back change {change_id}: {change.describe()}")
        return RollbackResult(change, response)

    def _apply_inverse(self, change: Change) -> Any:
        if change.type == ChangeType.CREATE:
            return self.client.delete_note(change.remote_id)
        if change.type == ChangeType.UPDATE:
            return self.client.update_note(change.remote_id, change.original_data)
        if change.type == ChangeType.DELETE:
            return self.client.create_note(change.original_data)
        if change.type == ChangeType.TAG_ADD:
            return self.client.remove_tag(change.remote_id, change.tag_name)
        if change.type == ChangeType.TAG_REMOVE:
            return self.client.add_tag(change.remote_id, change.tag_name)
        raise ValueError(f"Unknown change type: {change.type}")
