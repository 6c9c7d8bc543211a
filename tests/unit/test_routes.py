"""Tests for the HTTP routes, with the feedback service faked."""

from datetime import datetime, UTC

from fastapi.testclient import TestClient

from feedback_proxy.ledger import Ledger
from feedback_proxy.models import Change, ChangeType

from tests.unit.fakes import FakeFeedbackService


def test_root_and_health(api_client: TestClient, ledger: Ledger) -> None:
    assert api_client.get("/").json()["endpoints"]["changes"] == "/api/changes"

    health = api_client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["changes_count"] == 0


def test_create_note_returns_remote_note_and_records_change(
    api_client: TestClient,
) -> None:
    response = api_client.post("/api/notes", json={"title": "A"})

    assert response.status_code == 200
    assert response.json() == {"data": {"title": "A", "id": "1"}}

    changes = api_client.get("/api/changes").json()
    assert len(changes) == 1
    assert changes[0]["type"] == "create"
    assert changes[0]["remoteId"] == "1"
    assert changes[0]["originalData"] is None


def test_update_route_records_original(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.notes["2"] = {"id": "2", "tags": ["x"]}

    response = api_client.put("/api/notes/2", json={"tags": ["y"]})

    assert response.status_code == 200
    [change] = api_client.get("/api/changes").json()
    assert change["originalData"]["tags"] == ["x"]
    assert change["data"] == {"tags": ["y"]}


def test_tag_routes_return_updated_note(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.notes["4"] = {"id": "4", "title": "User Feedback Note", "tags": []}

    added = api_client.post("/api/notes/4/tags/feature-request")
    removed = api_client.delete("/api/notes/4/tags/feature-request")

    assert added.json()["data"]["tags"] == ["feature-request"]
    assert removed.json()["data"]["tags"] == []
    changes = api_client.get("/api/changes").json()
    assert [c["type"] for c in changes] == ["tag_add", "tag_remove"]
    assert changes[0]["updatedData"]["tags"] == ["feature-request"]


def test_tag_route_decodes_escaped_tag_names(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.notes["4"] = {"id": "4", "tags": []}

    api_client.post("/api/notes/4/tags/needs%20review")

    assert service.calls_to("add_tag") == [("4", "needs review")]


def test_remote_failure_returns_500_and_records_nothing(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.fail("create_note", status_code=422)

    response = api_client.post("/api/notes", json={"title": "A"})

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error"] == "Failed to create note"
    assert detail["status"] == 422
    assert api_client.get("/api/changes").json() == []


def test_delete_of_missing_note_fails(api_client: TestClient) -> None:
    response = api_client.delete("/api/notes/404")

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Failed to delete note"
    assert api_client.get("/api/changes").json() == []


def test_rollback_route_undoes_change_once(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.notes["3"] = {"id": "3", "title": "Z"}
    api_client.delete("/api/notes/3")
    [change] = api_client.get("/api/changes").json()

    first = api_client.post(f"/api/rollback/{change['id']}")
    second = api_client.post(f"/api/rollback/{change['id']}")

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["message"] == 'Rolled back: Deleted note "Z"'
    assert second.status_code == 404
    assert second.json()["detail"] == "Change not found"
    assert api_client.get("/api/changes").json() == []


def test_rollback_route_reports_remote_failure(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    api_client.post("/api/notes", json={"title": "A"})
    [change] = api_client.get("/api/changes").json()
    service.fail("delete_note")

    response = api_client.post(f"/api/rollback/{change['id']}")

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Failed to rollback change"
    assert len(api_client.get("/api/changes").json()) == 1


def test_list_notes_is_enriched_with_companies(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.notes["1"] = {"id": "1", "company": {"id": "company-1"}}
    service.notes["2"] = {"id": "2", "company": None}
    service.companies["company-1"] = {"name": "Acme Corporation", "domain": "acme.com"}

    body = api_client.get("/api/notes").json()

    assert body["totalResults"] == 2
    assert body["data"][0]["company"]["name"] == "Acme Corporation"
    assert body["data"][1]["company"] is None


def test_get_single_note(api_client: TestClient, service: FakeFeedbackService) -> None:
    service.notes["7"] = {"id": "7", "title": "Seven"}

    assert api_client.get("/api/notes/7").json() == {"data": {"id": "7", "title": "Seven"}}
    assert api_client.get("/api/notes/8").status_code == 500


def test_create_route_without_note_id_fails_and_records_nothing(
    api_client: TestClient, service: FakeFeedbackService
) -> None:
    service.create_note = lambda body: {}

    response = api_client.post("/api/notes", json={"title": "A"})

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Failed to create note"
    assert api_client.get("/api/changes").json() == []


def test_rollback_route_rejects_change_without_remote_id(
    api_client: TestClient, ledger: Ledger
) -> None:
    ledger.append(Change(
        id="42",
        type=ChangeType.TAG_ADD,
        timestamp=datetime.now(UTC),
        remote_id=None,
        data={"tagName": "t"},
        original_data=None,
    ))

    response = api_client.post("/api/rollback/42")

    assert response.status_code == 409
    assert "no remote note id" in response.json()["detail"]
    assert len(api_client.get("/api/changes").json()) == 1
