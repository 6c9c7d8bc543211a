"""
Company enrichment for note listings.

Notes from the feedback API only carry a company reference (`{"id": ...}`).
This module fetches each referenced company once, concurrently, and merges
its name, domain and description into the notes.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from feedback_proxy.exceptions import RemoteCallFailure
from feedback_proxy.protocols import FeedbackService, NoteList


logger = logging.getLogger(__name__)


def _company_id(note: Dict[str, Any]) -> Optional[str]:
    company = note.get("company")
    if isinstance(company, dict) and company.get("id"):
        return company["id"]
    return None


def fetch_companies(
    client: FeedbackService,
    company_ids: set,
    max_workers: int = 8
) -> Dict[str, Optional[Dict[str, Any]]]:
    """
    Fetch company details for each id in parallel.

    A failed fetch maps its id to None; it does not affect the other ids.
    """
    if not company_ids:
        return {}

    def fetch_one(company_id: str) -> Optional[Dict[str, Any]]:
        try:
            return client.get_company(company_id)
        except RemoteCallFailure as e:
            logger.error(f"Error fetching company {company_id}: {e.detail or e.message}")
            return None

    ordered_ids = sorted(company_ids)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(ordered_ids)))) as pool:
        results = pool.map(fetch_one, ordered_ids)
        return dict(zip(ordered_ids, results))


def enrich_notes_with_companies(
    client: FeedbackService,
    notes: NoteList,
    max_workers: int = 8
) -> NoteList:
    """
    Return copies of the notes with company details filled in.

    Notes without a company, or whose company could not be fetched, are
    returned unchanged.
    """
    company_ids = {cid for cid in (_company_id(note) for note in notes) if cid}
    companies = fetch_companies(client, company_ids, max_workers=max_workers)

    enriched = []
    for note in notes:
        company_id = _company_id(note)
        details = companies.get(company_id) if company_id else None
        if details:
            note = {
                **note,
                "company": {
                    "id": company_id,
                    "name": details.get("name"),
                    "domain": details.get("domain"),
                    "description": details.get("description"),
                },
            }
        enriched.append(note)

    return enriched
