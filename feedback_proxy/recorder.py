"""
Mutation recorder: applies note mutations remotely and records them in the ledger.

Every operation follows the same sequence:

1. Read the note's current state (all kinds except create)
2. Perform the remote mutation
3. Read the note again (tag operations only)
4. Build a Change and append it to the ledger

Any RemoteCallFailure in steps 1-3 propagates unchanged and nothing is
recorded.
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from feedback_proxy.exceptions import RemoteCallFailure
from feedback_proxy.ledger import Ledger
from feedback_proxy.models import Change, ChangeType
from feedback_proxy.protocols import FeedbackService


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedMutation:
    """A recorded change together with the remote response to return to the caller."""
    change: Change
    response: Any


class MutationRecorder:
    """
    Applies mutations through the feedback client and records each as a Change.

    No optimistic-concurrency check is made between the precondition read
    and the mutation; a concurrent edit by another client in that window
    makes `originalData` stale.
    """

    def __init__(self, client: FeedbackService, ledger: Ledger):
        self.client = client
        self.ledger = ledger

    def record_and_apply(self, kind: ChangeType | str, **params: Any) -> Change:
        """
        Apply a mutation of the given kind and return the recorded change.

        Args:
            kind: Change type (or its string value)
            **params: `body` for create/update, `note_id` for all but create,
                `tag_name` for tag operations

        Returns:
            The Change appended to the ledger
        """
        return self.apply(kind, **params).change

    def apply(self, kind: ChangeType | str, **params: Any) -> AppliedMutation:
        """Like record_and_apply, but also returns the remote response for the route."""
        kind = ChangeType(kind)
        if kind == ChangeType.CREATE:
            return self.create_note(params["body"])
        if kind == ChangeType.UPDATE:
            return self.update_note(params["note_id"], params["body"])
        if kind == ChangeType.DELETE:
            return self.delete_note(params["note_id"])
        if kind == ChangeType.TAG_ADD:
            return self.add_tag(params["note_id"], params["tag_name"])
        return self.remove_tag(params["note_id"], params["tag_name"])

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def create_note(self, body: Dict[str, Any]) -> AppliedMutation:
        created = self.client.create_note(body)

        remote_id = created.get("id") if isinstance(created, dict) else None
        if remote_id is None:
            # Without an id the create cannot be reversed, so it is not recorded.
            raise RemoteCallFailure(
                "Create response carried no note id",
                detail=created,
            )

        change = self._record(
            ChangeType.CREATE,
            remote_id=str(remote_id),
            data=copy.deepcopy(body),
            original_data=None,
        )
        return AppliedMutation(change, created)

    def update_note(self, note_id: str, body: Dict[str, Any]) -> AppliedMutation:
        original = self.client.get_note(note_id)
        updated = self.client.update_note(note_id, body)

        change = self._record(
            ChangeType.UPDATE,
            remote_id=note_id,
            data=copy.deepcopy(body),
            original_data=original,
        )
        return AppliedMutation(change, updated)

    def delete_note(self, note_id: str) -> AppliedMutation:
        original = self.client.get_note(note_id)
        ack = self.client.delete_note(note_id)

        change = self._record(
            ChangeType.DELETE,
            remote_id=note_id,
            data=None,
            original_data=original,
        )
        return AppliedMutation(change, ack)

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def add_tag(self, note_id: str, tag_name: str) -> AppliedMutation:
        original = self.client.get_note(note_id)
        self.client.add_tag(note_id, tag_name)
        updated = self.client.get_note(note_id)

        change = self._record(
            ChangeType.TAG_ADD,
            remote_id=note_id,
            data={"tagName": tag_name},
            original_data=original,
            updated_data=updated,
        )
        return AppliedMutation(change, updated)

    def remove_tag(self, note_id: str, tag_name: str) -> AppliedMutation:
        original = self.client.get_note(note_id)
        self.client.remove_tag(note_id, tag_name)
        updated = self.client.get_note(note_id)

        change = self._record(
            ChangeType.TAG_REMOVE,
            remote_id=note_id,
            data={"tagName": tag_name},
            original_data=original,
            updated_data=updated,
        )
        return AppliedMutation(change, updated)

    def _record(
        self,
        change_type: ChangeType,
        *,
        remote_id: Optional[str],
        data: Optional[Dict[str, Any]],
        original_data: Optional[Dict[str, Any]],
        updated_data: Optional[Dict[str, Any]] = None,
    ) -> Change:
        change = Change(
            id=self.ledger.next_id(),
            type=change_type,
            timestamp=datetime.now(UTC),
            remote_id=remote_id,
            data=data,
            original_data=original_data,
            updated_data=updated_data,
        )
        self.ledger.append(change)
        logger.info(f"Recorded change {change.id}: {change.describe()}")
        return change
