"""Protocols for dependency injection of the remote feedback service."""

from typing import Any, Dict, List, Protocol, runtime_checkable


@runtime_checkable
class FeedbackService(Protocol):
    """Protocol for feedback API clients.

    Every method returns the unwrapped ``data`` payload of the response and
    raises ``RemoteCallFailure`` on any failure.
    """

    def list_notes(self) -> Dict[str, Any]:
        """Return the full notes listing response (``data`` plus paging)."""
        ...

    def get_note(self, note_id: str) -> Dict[str, Any]:
        """Return the current representation of a note."""
        ...

    def create_note(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Create a note and return it, including its assigned id."""
        ...

    def update_note(self, note_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Update a note and return the updated representation."""
        ...

    def delete_note(self, note_id: str) -> Any:
        """Delete a note."""
        ...

    def add_tag(self, note_id: str, tag_name: str) -> Any:
        """Attach a tag to a note."""
        ...

    def remove_tag(self, note_id: str, tag_name: str) -> Any:
        """Detach a tag from a note."""
        ...

    def get_company(self, company_id: str) -> Dict[str, Any]:
        """Return company details."""
        ...


NoteList = List[Dict[str, Any]]
