# backend/tests/test_application_api.py
from conftest import complete_personality, recordings_for
from db import models as m


def _load(client, token):
    r = client.post("/api/application/load", json={"token": token})
    assert r.status_code == 200, r.text
    return r.json()["assessment"]


def test_create_link_load_save_reload(admin_client, client):
    r = admin_client.post("/api/admin/create-link", json={"adminLabel": "  Jane  "})
    assert r.status_code == 200, r.text
    body = r.json()
    token = body["token"]
    assert len(token) == 24
    assert body["url"] == f"http://apply.test/apply/{token}"

    loaded = _load(client, token)
    assert loaded["status"] == "in_progress"
    assert loaded["current_step"] == 1
    assert loaded["admin_label"] == "Jane"

    r = client.post(
        "/api/application/save",
        json={"token": token, "answersPatch": {"personality": {"hobbies": "chess", "pressureNotes": "calm"}}},
    )
    assert r.status_code == 200, r.text
    r = client.post(
        "/api/application/save",
        json={"token": token, "answersPatch": {"personality": {"honestyCommitment": True}}},
    )
    assert r.status_code == 200, r.text

    personality = _load(client, token)["answers"]["personality"]
    assert personality == {"hobbies": "chess", "pressureNotes": "calm", "honestyCommitment": True}


def test_load_errors(client):
    assert client.post("/api/application/load", json={}).status_code == 400
    r = client.post("/api/application/load", json={"token": "nope"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Invalid link"


def test_save_validation(client, assessment):
    r = client.post("/api/application/save", json={"token": assessment.token})
    assert r.status_code == 400
    r = client.post("/api/application/save", json={"token": assessment.token, "answersPatch": [1, 2]})
    assert r.status_code == 400


def test_step_change_is_gated(client, assessment):
    r = client.post("/api/application/save", json={"token": assessment.token, "currentStep": 2})
    assert r.status_code == 422

    r = client.post(
        "/api/application/save",
        json={"token": assessment.token, "answersPatch": complete_personality(), "currentStep": 3},
    )
    assert r.status_code == 200, r.text
    assert r.json()["currentStep"] == 3

    # going back is always allowed
    r = client.post("/api/application/save", json={"token": assessment.token, "currentStep": 1})
    assert r.json()["currentStep"] == 1


def test_submit_requires_all_videos_then_freezes(client, db, assessment):
    r = client.post("/api/application/submit", json={"token": assessment.token})
    assert r.status_code == 422

    assessment.answers = {**complete_personality(), "video": {"recordings": recordings_for(assessment.id)}}
    db.commit()

    r = client.post("/api/application/submit", json={"token": assessment.token})
    assert r.status_code == 200 and r.json() == {"ok": True}
    # idempotent
    r = client.post("/api/application/submit", json={"token": assessment.token})
    assert r.status_code == 200

    before = _load(client, assessment.token)
    assert before["status"] == "submitted"
    assert before["submitted_at"] is not None

    r = client.post(
        "/api/application/save",
        json={"token": assessment.token, "answersPatch": {"personality": {"hobbies": "changed"}}},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Already submitted"

    after = _load(client, assessment.token)
    assert after["answers"] == before["answers"]
    assert after["current_step"] == before["current_step"]


def test_log_appends_stamps_and_counts(client, db, assessment):
    events = [
        {"type": "window_blur"},
        {"type": "copy", "details": {"len": 4}},
        {"type": "window_blur"},
        "garbage",
        {"details": {}},
    ]
    r = client.post("/api/application/log", json={"token": assessment.token, "events": events})
    assert r.status_code == 200, r.text
    assert r.json()["accepted"] == 3

    db.expire_all()
    stored = db.get(m.Assessment, assessment.id).proctoring
    assert stored["counts"] == {"window_blur": 2, "copy": 1}
    assert [e["type"] for e in stored["events"]] == ["window_blur", "copy", "window_blur"]
    assert all(e["atIso"].endswith("Z") for e in stored["events"])
    assert stored["events"][1]["details"] == {"len": 4}


def test_log_tolerates_odd_event_shapes(client, db, assessment):
    events = [
        {"type": "copy", "details": "abc"},
        {"type": "paste", "details": 5},
        {"type": ["copy"]},
        {"type": 7},
        {"type": "window_blur"},
    ]
    r = client.post("/api/application/log", json={"token": assessment.token, "events": events})
    assert r.status_code == 200, r.text
    assert r.json()["accepted"] == 3

    db.expire_all()
    stored = db.get(m.Assessment, assessment.id).proctoring
    assert stored["counts"] == {"copy": 1, "paste": 1, "window_blur": 1}
    assert [e["details"] for e in stored["events"]] == [{"value": "abc"}, {"value": 5}, {}]


def test_log_rejects_non_list(client, assessment):
    r = client.post("/api/application/log", json={"token": assessment.token, "events": {"type": "copy"}})
    assert r.status_code == 400
    r = client.post("/api/application/log", json={"token": "missing", "events": []})
    assert r.status_code == 404
