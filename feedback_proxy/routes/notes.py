"""
API routes proxying note and tag operations to the feedback service.

Every mutating route goes through the MutationRecorder so the change is
recorded in the ledger once the remote call has succeeded.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from feedback_proxy.config import get_settings
from feedback_proxy.dependencies import get_client, get_recorder
from feedback_proxy.enrichment import enrich_notes_with_companies
from feedback_proxy.exceptions import RemoteCallFailure
from feedback_proxy.models import ChangeType
from feedback_proxy.protocols import FeedbackService
from feedback_proxy.recorder import MutationRecorder
from feedback_proxy.routes.errors import remote_failure


router = APIRouter(prefix="/notes", tags=["Notes"])

settings = get_settings()


# =============================================================================
# Read
# =============================================================================


@router.get("")
def list_notes(client: FeedbackService = Depends(get_client)):
    """
    List notes from the feedback service.

    Each note's company reference is replaced with the company's name,
    domain and description where those can be fetched.
    """
    try:
        listing = client.list_notes()
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to fetch notes from Productboard API")

    notes = listing.get("data") if isinstance(listing, dict) else None
    if notes:
        listing["data"] = enrich_notes_with_companies(
            client, notes, max_workers=settings.enrichment_max_workers
        )
    return listing


@router.get("/{note_id}")
def get_note(note_id: str, client: FeedbackService = Depends(get_client)):
    """Get a single note."""
    try:
        return {"data": client.get_note(note_id)}
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to fetch note")


# =============================================================================
# Create / Update / Delete
# =============================================================================


@router.post("")
def create_note(
    body: Dict[str, Any] = Body(...),
    recorder: MutationRecorder = Depends(get_recorder)
):
    """Create a note and record a `create` change."""
    try:
        applied = recorder.apply(ChangeType.CREATE, body=body)
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to create note")
    return {"data": applied.response}


@router.put("/{note_id}")
def update_note(
    note_id: str,
    body: Dict[str, Any] = Body(...),
    recorder: MutationRecorder = Depends(get_recorder)
):
    """
    Update a note and record an `update` change.

    The note is read first so the change holds its previous representation.
    """
    try:
        applied = recorder.apply(ChangeType.UPDATE, note_id=note_id, body=body)
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to update note")
    return {"data": applied.response}


@router.delete("/{note_id}")
def delete_note(note_id: str, recorder: MutationRecorder = Depends(get_recorder)):
    """Delete a note and record a `delete` change."""
    try:
        applied = recorder.apply(ChangeType.DELETE, note_id=note_id)
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to delete note")
    return applied.response


# =============================================================================
# Tags
# =============================================================================


@router.post("/{note_id}/tags/{tag_name:path}")
def add_tag(
    note_id: str,
    tag_name: str,
    recorder: MutationRecorder = Depends(get_recorder)
):
    """Add a tag to a note. Returns the note as read after the change."""
    try:
        applied = recorder.apply(ChangeType.TAG_ADD, note_id=note_id, tag_name=tag_name)
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to add tag to note")
    return {"data": applied.response}


@router.delete("/{note_id}/tags/{tag_name:path}")
def remove_tag(
    note_id: str,
    tag_name: str,
    recorder: MutationRecorder = Depends(get_recorder)
):
    """Remove a tag from a note. Returns the note as read after the change."""
    try:
        applied = recorder.apply(ChangeType.TAG_REMOVE, note_id=note_id, tag_name=tag_name)
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to remove tag from note")
    return {"data": applied.response}
