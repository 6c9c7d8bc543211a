"""
Service wiring and FastAPI dependencies.

The ledger, client, recorder and rollback executor are built once by the
application lifespan and kept on `app.state`. Route handlers reach them
through the dependency functions below, which tests override.
"""

from dataclasses import dataclass

from fastapi import Request

from feedback_proxy.client import FeedbackClient
from feedback_proxy.config import Settings
from feedback_proxy.ledger import Ledger
from feedback_proxy.protocols import FeedbackService
from feedback_proxy.recorder import MutationRecorder
from feedback_proxy.rollback import RollbackExecutor
from feedback_proxy.store import ChangeStore


@dataclass
class Services:
    """Everything the routes need, sharing a single ledger."""
    client: FeedbackService
    ledger: Ledger
    recorder: MutationRecorder
    rollback: RollbackExecutor


def build_services(settings: Settings) -> Services:
    """Create the client and ledger from settings and load the stored changes."""
    client = FeedbackClient.from_settings(settings)
    ledger = Ledger(ChangeStore(settings.changes_file))
    ledger.load()
    return Services(
        client=client,
        ledger=ledger,
        recorder=MutationRecorder(client, ledger),
        rollback=RollbackExecutor(client, ledger),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_client(request: Request) -> FeedbackService:
    return get_services(request).client


def get_ledger(request: Request) -> Ledger:
    return get_services(request).ledger


def get_recorder(request: Request) -> MutationRecorder:
    return get_services(request).recorder


def get_rollback_executor(request: Request) -> RollbackExecutor:
    return get_services(request).rollback
