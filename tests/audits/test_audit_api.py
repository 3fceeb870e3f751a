import pytest

from test_audit_service import ANSWERS, REPORT


@pytest.fixture
def juan_client(client):
    with client.session_transaction() as sess:
        sess["username"] = "juan"
        sess["role"] = "auditor"
    return client


def test_questions_list_the_catalogue_and_assigned_stores(juan_client):
    body = juan_client.get("/api/audits/questions").get_json()
    assert body["questions"][0]["id"] == "dep_01"
    assert [s["id"] for s in body["stores"]] == ["STORE-001"]


def test_analyze_then_save(juan_client, vision, selfie, audits_repo, evidence):
    draft = {"store_id": "STORE-001", "answers": ANSWERS, "photos": {"dep_06": selfie}}
    vision.queue(REPORT)
    res = juan_client.post("/api/audits/analyze", json=draft)
    assert res.status_code == 200
    report = res.get_json()["report"]
    assert report["score"] == 64

    res = juan_client.post("/api/audits", json={**draft, "report": report})
    assert res.status_code == 200
    assert res.get_json()["saved"] is True
    assert len(audits_repo.records) == 1
    assert evidence.uploads == ["audit_juan_qdep_06"]


def test_analysis_failure_is_502(juan_client, vision, selfie):
    vision.queue(TimeoutError("timed out"))
    res = juan_client.post(
        "/api/audits/analyze", json={"store_id": "STORE-001", "answers": ANSWERS, "photos": {"dep_06": selfie}}
    )
    assert res.status_code == 502
    assert res.get_json()["success"] is False


def test_save_failure_is_502(juan_client, audits_repo, selfie):
    audits_repo.fail = True
    res = juan_client.post(
        "/api/audits",
        json={"store_id": "STORE-001", "answers": ANSWERS, "photos": {"dep_06": selfie}, "report": REPORT},
    )
    assert res.status_code == 502


def test_save_without_report_is_400(juan_client):
    res = juan_client.post("/api/audits", json={"store_id": "STORE-001", "answers": ANSWERS})
    assert res.status_code == 400


def test_incomplete_audit_is_400(juan_client):
    res = juan_client.post("/api/audits/analyze", json={"store_id": "STORE-001", "answers": {"dep_01": "Sí"}})
    assert res.status_code == 400
