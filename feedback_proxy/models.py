"""
Pydantic models for the change ledger and the proxy's responses.

Change fields are serialized with camelCase aliases, which is also the
layout of the ledger file on disk.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================


class ChangeType(str, Enum):
    """Kind of mutation a change records. Determines how it is rolled back."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TAG_ADD = "tag_add"
    TAG_REMOVE = "tag_remove"


TAG_CHANGE_TYPES = (ChangeType.TAG_ADD, ChangeType.TAG_REMOVE)


# =============================================================================
# Ledger Models
# =============================================================================


class Change(BaseModel):
    """
    One mutation applied to the remote feedback service.

    A change is recorded only after the remote call succeeded and is never
    modified afterwards. It carries enough state to issue the inverse call.
    """

    id: str = Field(..., description="Unique, time-ordered change id")
    type: ChangeType
    timestamp: datetime

    remote_id: Optional[str] = Field(
        default=None,
        alias="remoteId",
        description="Id of the remote note this change applies to"
    )
    data: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Payload as sent: note body, {tagName}, or null for deletes"
    )
    original_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="originalData",
        description="Remote note state read before the mutation"
    )
    updated_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="updatedData",
        description="Remote note state read after a tag mutation"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @property
    def tag_name(self) -> Optional[str]:
        """Tag name for tag changes, None otherwise."""
        if self.type not in TAG_CHANGE_TYPES or not self.data:
            return None
        return self.data.get("tagName")

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the JSON-compatible layout used on disk."""
        return self.model_dump(mode="json", by_alias=True)

    def describe(self) -> str:
        """Human-readable one-line summary of the change."""
        note = self._note_label()
        if self.type == ChangeType.CREATE:
            return f"Created note {note}"
        if self.type == ChangeType.UPDATE:
            return f"Updated note {note}"
        if self.type == ChangeType.DELETE:
            return f"Deleted note {note}"
        if self.type == ChangeType.TAG_ADD:
            return f'Added tag "{self.tag_name}" to note {note}'
        return f'Removed tag "{self.tag_name}" from note {note}'

    def _note_label(self) -> str:
        for snapshot in (self.original_data, self.data):
            title = (snapshot or {}).get("title")
            if title:
                return f'"{title}"'
        return f'"{self.remote_id}"' if self.remote_id else "(unknown)"


# =============================================================================
# Response Models
# =============================================================================


class RollbackResponse(BaseModel):
    """Response from a successful rollback."""

    success: bool = True
    change_id: str
    message: str
    rollback_result: Any = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    remote_configured: bool
    changes_count: int = 0

