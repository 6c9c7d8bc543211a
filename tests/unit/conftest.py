"""Shared test fixtures."""

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from feedback_proxy.ledger import Ledger
from feedback_proxy.recorder import MutationRecorder
from feedback_proxy.rollback import RollbackExecutor
from feedback_proxy.store import ChangeStore

from tests.unit.fakes import FakeFeedbackService


@pytest.fixture
def service() -> FakeFeedbackService:
    return FakeFeedbackService()


@pytest.fixture
def changes_file(tmp_path: Path) -> Path:
    return tmp_path / "local_changes.json"


@pytest.fixture
def ledger(changes_file: Path) -> Ledger:
    """An empty, loaded ledger backed by a file in tmp_path."""
    ledger = Ledger(ChangeStore(changes_file))
    ledger.load()
    return ledger


@pytest.fixture
def recorder(service: FakeFeedbackService, ledger: Ledger) -> MutationRecorder:
    return MutationRecorder(service, ledger)


@pytest.fixture
def executor(service: FakeFeedbackService, ledger: Ledger) -> RollbackExecutor:
    return RollbackExecutor(service, ledger)


@pytest.fixture
def api_client(
    service: FakeFeedbackService,
    ledger: Ledger,
    recorder: MutationRecorder,
    executor: RollbackExecutor,
) -> Iterator[TestClient]:
    """TestClient for the app with all services replaced by the fixtures above."""
    from feedback_proxy import dependencies
    from feedback_proxy.app import app

    app.dependency_overrides[dependencies.get_client] = lambda: service
    app.dependency_overrides[dependencies.get_ledger] = lambda: ledger
    app.dependency_overrides[dependencies.get_recorder] = lambda: recorder
    app.dependency_overrides[dependencies.get_rollback_executor] = lambda: executor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
