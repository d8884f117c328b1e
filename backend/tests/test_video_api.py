# backend/tests/test_video_api.py
import re

from db import models as m
from services.video_uploads import build_storage_path, replace_recording


def test_upload_url_points_at_assessment_prefix(client, assessment, fake_s3):
    r = client.post("/api/video/upload-url", json={"token": assessment.token, "questionIndex": 2})
    assert r.status_code == 200, r.text
    body = r.json()
    assert re.fullmatch(rf"videos/{assessment.id}/q3-\d+\.webm", body["storagePath"])
    assert "op=put_object" in body["signedUrl"]
    assert fake_s3.presigned[-1][0] == "put_object"


def test_upload_url_validation(client, assessment):
    assert client.post("/api/video/upload-url", json={"token": assessment.token}).status_code == 400
    assert client.post("/api/video/upload-url", json={"token": "nope", "questionIndex": 0}).status_code == 404

    r = client.post("/api/video/upload-url", json={"token": assessment.token, "questionIndex": True})
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing questionIndex"


def test_storage_path_index_is_clamped():
    assert build_storage_path("abc", 9, now_ms=5) == "videos/abc/q5-5.webm"
    assert build_storage_path("abc", -3, now_ms=5) == "videos/abc/q1-5.webm"


def _commit(client, token, index, path, duration=30):
    return client.post(
        "/api/video/commit",
        json={
            "token": token,
            "questionIndex": index,
            "storagePath": path,
            "durationSec": duration,
            "sizeBytes": 2048,
            "createdAtIso": "2024-01-01T00:00:00Z",
        },
    )


def test_commit_replaces_slot_and_keeps_others(client, db, assessment):
    prefix = f"videos/{assessment.id}"
    assert _commit(client, assessment.token, 1, f"{prefix}/q2-1.webm").status_code == 200
    assert _commit(client, assessment.token, 2, f"{prefix}/q3-1.webm").status_code == 200
    assert _commit(client, assessment.token, 2, f"{prefix}/q3-2.webm", duration=45).status_code == 200

    db.expire_all()
    recordings = db.get(m.Assessment, assessment.id).answers["video"]["recordings"]
    by_index = {r["questionIndex"]: r for r in recordings}
    assert len(recordings) == 2
    assert by_index[1]["storagePath"] == f"{prefix}/q2-1.webm"
    assert by_index[2]["storagePath"] == f"{prefix}/q3-2.webm"
    assert by_index[2]["durationSec"] == 45


def test_commit_validation(client, assessment):
    prefix = f"videos/{assessment.id}"
    assert _commit(client, assessment.token, 5, f"{prefix}/q6-1.webm").status_code == 400
    assert _commit(client, assessment.token, 0, "videos/someone-else/q1-1.webm").status_code == 400
    assert _commit(client, assessment.token, 0, "").status_code == 400
    assert _commit(client, assessment.token, True, f"{prefix}/q2-1.webm").status_code == 400

    r = client.post("/api/video/commit", json={"token": assessment.token, "storagePath": f"{prefix}/q1-1.webm"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing questionIndex"


def test_video_endpoints_refuse_after_submit(client, db, assessment):
    assessment.status = m.AssessmentStatus.submitted
    db.commit()
    r = client.post("/api/video/upload-url", json={"token": assessment.token, "questionIndex": 0})
    assert r.status_code == 409
    r = _commit(client, assessment.token, 0, f"videos/{assessment.id}/q1-1.webm")
    assert r.status_code == 409


def test_replace_recording_is_pure():
    answers = {"video": {"recordings": [{"questionIndex": 0, "storagePath": "a"}], "attemptedQuestionIndices": [0]}}
    out = replace_recording(answers, {"questionIndex": 0, "storagePath": "b"})
    assert out["video"]["recordings"] == [{"questionIndex": 0, "storagePath": "b"}]
    assert out["video"]["attemptedQuestionIndices"] == [0]
    assert answers["video"]["recordings"] == [{"questionIndex": 0, "storagePath": "a"}]
