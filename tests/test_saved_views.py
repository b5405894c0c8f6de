from __future__ import annotations
import pytest

from app import create_app
from extensions import db
from models import User, TeamAvailabilityView

URL = "/api/v1/scheduling/team-availability"

@pytest.fixture()
def app_ctx():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        for email, role in (("lead@pmi.edu", "lead_instructor"), ("other@pmi.edu", "instructor")):
            u = User(email=email, name=email.split("@")[0], role=role, is_active_flag=True)
            u.set_password("pass")
            db.session.add(u)
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app_ctx):
    return app_ctx.test_client()

def login_as(client, email, password="pass"):
    r = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200

def _save(client, name, emails):
    return client.post(URL, json={"name": name, "instructor_emails": emails})

def test_save_view_normalizes_emails(client):
    login_as(client, "lead@pmi.edu")
    r = _save(client, "  Tuesday crew ", [" A@pmi.edu", "b@PMI.edu", "a@pmi.edu"])
    assert r.status_code == 200
    js = r.get_json()
    assert js["success"] is True
    view = js["view"]
    assert view["name"] == "Tuesday crew"
    assert view["instructor_emails"] == ["a@pmi.edu", "b@pmi.edu"]
    assert view["created_by"] == "lead@pmi.edu"
    assert db.session.get(TeamAvailabilityView, view["id"]) is not None

@pytest.mark.parametrize("payload,message", [
    ({"name": "   ", "instructor_emails": ["a@pmi.edu", "b@pmi.edu"]}, "Name is required"),
    ({"instructor_emails": ["a@pmi.edu", "b@pmi.edu"]}, "Name is required"),
    ({"name": "Solo", "instructor_emails": ["a@pmi.edu"]}, "At least 2 instructor emails are required"),
    ({"name": "Dupes", "instructor_emails": ["a@pmi.edu", "A@pmi.edu "]}, "At least 2 instructor emails are required"),
    ({"name": "Not a list", "instructor_emails": "a@pmi.edu,b@pmi.edu"}, "At least 2 instructor emails are required"),
])
def test_save_view_validation(client, payload, message):
    login_as(client, "lead@pmi.edu")
    r = client.post(URL, json=payload)
    assert r.status_code == 400
    assert r.get_json() == {"success": False, "error": message}

def test_save_requires_login(client):
    r = _save(client, "x", ["a@pmi.edu", "b@pmi.edu"])
    assert r.status_code == 401

def test_list_only_own_views_newest_first(client):
    login_as(client, "lead@pmi.edu")
    first = _save(client, "First", ["a@pmi.edu", "b@pmi.edu"]).get_json()["view"]
    second = _save(client, "Second", ["c@pmi.edu", "d@pmi.edu"]).get_json()["view"]

    r = client.get(f"{URL}/saved")
    assert r.status_code == 200
    assert [v["id"] for v in r.get_json()["views"]] == [second["id"], first["id"]]

    client.post("/api/v1/auth/logout")
    login_as(client, "other@pmi.edu")
    assert client.get(f"{URL}/saved").get_json()["views"] == []

def test_delete_view(client):
    login_as(client, "lead@pmi.edu")
    vid = _save(client, "Temp", ["a@pmi.edu", "b@pmi.edu"]).get_json()["view"]["id"]

    assert client.delete(f"{URL}/saved").status_code == 400
    assert client.delete(f"{URL}/saved?id=abc").status_code == 400

    r = client.delete(f"{URL}/saved?id={vid}")
    assert r.status_code == 200
    assert r.get_json() == {"success": True}
    assert client.get(f"{URL}/saved").get_json()["views"] == []
    assert client.delete(f"{URL}/saved?id={vid}").status_code == 404

def test_cannot_delete_someone_elses_view(client):
    login_as(client, "lead@pmi.edu")
    vid = _save(client, "Mine", ["a@pmi.edu", "b@pmi.edu"]).get_json()["view"]["id"]
    client.post("/api/v1/auth/logout")

    login_as(client, "other@pmi.edu")
    r = client.delete(f"{URL}/saved?id={vid}")
    assert r.status_code == 404
    assert db.session.get(TeamAvailabilityView, vid) is not None

def test_csrf_enforced_when_enabled(app_ctx, client):
    login_as(client, "lead@pmi.edu")
    app_ctx.config["WTF_CSRF_ENABLED"] = True

    r = _save(client, "No token", ["a@pmi.edu", "b@pmi.edu"])
    assert r.status_code == 400

    token = client.get("/api/v1/csrf").get_json()["csrf"]
    r = client.post(URL, json={"name": "With token", "instructor_emails": ["a@pmi.edu", "b@pmi.edu"]},
                    headers={"X-CSRF-Token": token})
    assert r.status_code == 200

@pytest.mark.parametrize("raw", ["%C2%B2", "1.5", "-3", "0", "9" * 30])
def test_delete_view_rejects_bad_ids(client, raw):
    login_as(client, "lead@pmi.edu")
    r = client.delete(f"{URL}/saved?id={raw}")
    assert r.status_code == 400
    assert r.get_json() == {"success": False, "error": "id must be an integer"}
