"""
Exception types raised by the change ledger and the remote client.
"""

from typing import Any, Optional


class FeedbackProxyError(Exception):
    """Base class for feedback proxy exceptions."""


class RemoteCallFailure(FeedbackProxyError):
    """
    The feedback service returned a non-success status, or the transport failed.

    `status_code` is None for transport errors (connection refused, timeout).
    `detail` holds the remote error body when one was returned.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class ChangeNotFound(FeedbackProxyError):
    """Raised when a change id is not present in the ledger."""

    def __init__(self, change_id: str):
        super().__init__(f"Change not found: {change_id}")
        self.change_id = change_id


class PersistenceFailure(FeedbackProxyError):
    """Raised when the ledger cannot be written to durable storage."""


class CorruptState(FeedbackProxyError):
    """Raised when the stored ledger cannot be parsed."""


class IrreversibleChange(FeedbackProxyError):
    """Raised when a stored change lacks what its inverse call needs."""

    def __init__(self, change_id: str, reason: str):
        super().__init__(f"Change {change_id} cannot be rolled back: {reason}")
        self.change_id = change_id
        self.reason = reason
