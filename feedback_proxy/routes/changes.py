"""
API routes for listing and rolling back recorded changes.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from feedback_proxy.dependencies import get_ledger, get_rollback_executor
from feedback_proxy.exceptions import ChangeNotFound, IrreversibleChange, RemoteCallFailure
from feedback_proxy.ledger import Ledger
from feedback_proxy.models import Change, RollbackResponse
from feedback_proxy.rollback import RollbackExecutor
from feedback_proxy.routes.errors import remote_failure


router = APIRouter(tags=["Changes"])


@router.get("/changes", response_model=List[Change])
def list_changes(ledger: Ledger = Depends(get_ledger)) -> List[Change]:
    """All recorded changes, oldest first."""
    return ledger.list()


@router.post("/rollback/{change_id}", response_model=RollbackResponse)
def rollback_change(
    change_id: str,
    executor: RollbackExecutor = Depends(get_rollback_executor)
) -> RollbackResponse:
    """
    Undo a recorded change.

    Issues the inverse call against the feedback service and removes the
    change from the ledger. A change can only be rolled back once; a
    failed inverse call leaves it in place so the rollback can be retried.
    """
    try:
        result = executor.rollback(change_id)
    except ChangeNotFound:
        raise HTTPException(status_code=404, detail="Change not found")
    except IrreversibleChange as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RemoteCallFailure as e:
        raise remote_failure(e, "Failed to rollback change")

    return RollbackResponse(
        change_id=change_id,
        message=f"Rolled back: {result.change.describe()}",
        rollback_result=result.response,
    )
