"""Tests for service wiring at startup."""

import json
from pathlib import Path
from unittest.mock import patch

from feedback_proxy.client import FeedbackClient
from feedback_proxy.config import Settings
from feedback_proxy.dependencies import build_services


def test_build_services_shares_one_loaded_ledger(tmp_path: Path) -> None:
    changes_file = tmp_path / "local_changes.json"
    changes_file.write_text(json.dumps([{
        "id": "456",
        "type": "tag_remove",
        "timestamp": "2024-05-01T12:00:00Z",
        "remoteId": "note2",
        "data": {"tagName": "removed-tag"},
    }]), encoding="utf-8")
    settings = Settings(changes_file=str(changes_file), feedback_api_token="tok")

    with patch("feedback_proxy.client.requests.Session"):
        services = build_services(settings)

    assert isinstance(services.client, FeedbackClient)
    assert services.recorder.ledger is services.ledger
    assert services.rollback.ledger is services.ledger
    [change] = services.ledger.list()
    assert change.tag_name == "removed-tag"


def test_build_services_survives_corrupt_ledger_file(tmp_path: Path) -> None:
    changes_file = tmp_path / "local_changes.json"
    changes_file.write_text("invalid json content {", encoding="utf-8")

    with patch("feedback_proxy.client.requests.Session"):
        services = build_services(Settings(changes_file=str(changes_file)))

    assert services.ledger.list() == []
