# backend/tests/test_admin_api.py
import json

from fastapi.testclient import TestClient

from conftest import make_admin, recordings_for
from db import models as m
from main import app


def test_admin_login_sets_flag_cookie(client):
    assert client.post("/api/admin/login", json={"password": "wrong"}).status_code == 401
    assert client.post("/api/admin/login", json={}).status_code == 401

    r = client.post("/api/admin/login", json={"password": "admin-pass"})
    assert r.status_code == 200
    cookie = r.headers["set-cookie"]
    assert "assessment_admin=" in cookie
    assert "HttpOnly" in cookie
    assert "Max-Age=28800" in cookie


def test_admin_routes_require_auth(client, assessment):
    assert client.get("/api/admin/submissions").status_code == 401
    assert client.post("/api/admin/create-link", json={}).status_code == 401
    assert client.post(f"/api/admin/run-ai-score/{assessment.id}").status_code == 401

    r = client.get("/api/admin/submissions", headers={"Cookie": "assessment_admin=forged"})
    assert r.status_code == 401


def test_trainer_session_is_enough_and_is_recorded_as_creator(db):
    trainer = make_admin(db, "t@example.com", "secret1")
    c = TestClient(app)
    assert c.post("/api/auth/login", json={"email": "t@example.com", "password": "secret1"}).status_code == 200

    r = c.post("/api/admin/create-link", json={"adminLabel": None})
    assert r.status_code == 200, r.text
    row = db.query(m.Assessment).filter_by(token=r.json()["token"]).one()
    assert row.created_by_trainer_id == trainer.id


def test_submissions_list_and_detail(admin_client, db, assessment, fake_s3):
    assessment.answers = {"video": {"recordings": recordings_for(assessment.id, indices=[0, 3])}}
    db.commit()

    items = admin_client.get("/api/admin/submissions").json()["items"]
    assert [i["id"] for i in items] == [assessment.id]

    r = admin_client.get(f"/api/admin/submissions/{assessment.id}")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["item"]["id"] == assessment.id
    assert [v["questionIndex"] for v in body["videoLinks"]] == [0, 3]
    assert all(exp == 3600 for _, _, exp in fake_s3.presigned)

    assert admin_client.get("/api/admin/submissions/missing").status_code == 404


def test_download_is_json_attachment(admin_client, assessment):
    r = admin_client.get(f"/api/admin/download/{assessment.id}")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert f'filename="assessment-{assessment.id}.json"' in r.headers["content-disposition"]
    assert json.loads(r.content)["token"] == assessment.token


def test_delete_removes_rows_even_when_storage_fails(admin_client, db, assessment, fake_s3):
    assessment.answers = {"video": {"recordings": recordings_for(assessment.id, indices=[0, 1])}}
    db.commit()
    fake_s3.fail_keys.add(f"videos/{assessment.id}/q1-1700000000000.webm")

    assert admin_client.post("/api/admin/delete", json={"ids": []}).status_code == 400
    assert admin_client.post("/api/admin/delete", json={"ids": "nope"}).status_code == 400

    r = admin_client.post("/api/admin/delete", json={"ids": [assessment.id]})
    assert r.status_code == 200
    assert r.json() == {"success": True, "deleted": 1}
    assert fake_s3.deleted == [f"videos/{assessment.id}/q2-1700000000000.webm"]

    db.expire_all()
    assert db.query(m.Assessment).count() == 0


def test_save_video_behavior(admin_client, db, assessment):
    behavior = {"tone": "calm", "speed": 6, "notes": "steady"}
    r = admin_client.post(f"/api/admin/save-video-behavior/{assessment.id}", json=behavior)
    assert r.status_code == 200

    db.expire_all()
    assert db.get(m.Assessment, assessment.id).video_behavior == behavior
