"""HTTP client for the remote feedback API (notes, tags, companies)."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from feedback_proxy.config import Settings
from feedback_proxy.exceptions import RemoteCallFailure


logger = logging.getLogger(__name__)

# Characters left unescaped by JavaScript's encodeURIComponent.
_SEGMENT_SAFE_CHARS = "-_.!~*'()"


def quote_segment(value: str) -> str:
    """Escape a note id, tag name or company id for use as a single path segment."""
    return quote(str(value), safe=_SEGMENT_SAFE_CHARS)


class FeedbackClient:
    """Encapsulated feedback API with bearer auth and a per-call timeout."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        api_version: str = "1",
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.sess = requests.Session()
        self.sess.headers.update({
            "Authorization": f"Bearer {token}",
            "X-Version": api_version,
            "Content-Type": "application/json",
        })

        if not token:
            logger.warning("No feedback API token configured; remote calls will be rejected")

        logger.debug(
            f"Client ready: base_url {self.base_url!r}, "
            f"api_version {api_version!r}, timeout {timeout!r}"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedbackClient":
        return cls(
            settings.feedback_api_base_url,
            settings.feedback_api_token,
            api_version=settings.feedback_api_version,
            timeout=settings.request_timeout_seconds,
        )

    # -------------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------------

    def list_notes(self) -> Dict[str, Any]:
        return self._request("GET", "/notes", unwrap=False)

    def get_note(self, note_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/notes/{quote_segment(note_id)}")

    def create_note(self, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/notes", body=body)

    def update_note(self, note_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/notes/{quote_segment(note_id)}", body=body)

    def delete_note(self, note_id: str) -> Any:
        return self._request("DELETE", f"/notes/{quote_segment(note_id)}")

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def add_tag(self, note_id: str, tag_name: str) -> Any:
        path = f"/notes/{quote_segment(note_id)}/tags/{quote_segment(tag_name)}"
        return self._request("POST", path)

    def remove_tag(self, note_id: str, tag_name: str) -> Any:
        path = f"/notes/{quote_segment(note_id)}/tags/{quote_segment(tag_name)}"
        return self._request("DELETE", path)

    # -------------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------------

    def get_company(self, company_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/companies/{quote_segment(company_id)}")

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[Dict[str, Any]] = None,
        unwrap: bool = True,
    ) -> Any:
        """Issue a request and return the decoded response.

        With ``unwrap`` set, the ``data`` member of the response envelope is
        returned. Empty bodies (e.g. 204 No Content) decode to an empty dict.

        Raises:
            RemoteCallFailure: On transport errors, timeouts and non-2xx statuses.
        """
        url = self.base_url + path
        logger.debug(f"Making request: {method} {path}")

        try:
            r = self.sess.request(method, url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteCallFailure(f"{method} {path} failed: {e}") from e

        if not r.ok:
            detail = _decode_body(r)
            raise RemoteCallFailure(
                f"{method} {path} returned {r.status_code}",
                status_code=r.status_code,
                detail=detail,
            )

        rv = _decode_body(r)
        if unwrap and isinstance(rv, dict) and "data" in rv:
            return rv["data"]
        return rv


def _decode_body(r: requests.Response) -> Any:
    """Parse a JSON body, falling back to text for non-JSON error pages."""
    if not r.content:
        return {}
    try:
        return r.json()
    except ValueError:
        return r.text
