from __future__ import annotations
from datetime import date, time
import pytest

from app import create_app
from extensions import db
from models import User, InstructorAvailability

URL = "/api/v1/scheduling/availability"

@pytest.fixture()
def app_ctx():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        for email, name, role, active in (
            ("i1@pmi.edu", "Instructor One", "instructor", True),
            ("i2@pmi.edu", "Instructor Two", "volunteer_instructor", True),
            ("lead@pmi.edu", "Lead", "lead_instructor", True),
            ("gone@pmi.edu", "Former", "instructor", False),
            ("guest@pmi.edu", "Guest", "guest", True),
        ):
            u = User(email=email, name=name, role=role, is_active_flag=active)
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

def _uid(email):
    return User.query.filter_by(email=email).first().id

def test_guest_cannot_post_availability(client):
    login_as(client, "guest@pmi.edu")
    r = client.post(URL, json={"date": "2025-09-01", "is_all_day": True})
    assert r.status_code == 403
    assert r.get_json() == {"success": False, "error": "Forbidden"}

def test_create_timed_slot(client):
    login_as(client, "i1@pmi.edu")
    r = client.post(URL, json={"date": "2025-09-01", "start_time": "09:00", "end_time": "12:30", "notes": "am only"})
    assert r.status_code == 201
    slot = r.get_json()["slot"]
    assert slot["date"] == "2025-09-01"
    assert (slot["start_time"], slot["end_time"]) == ("09:00", "12:30")
    assert slot["is_all_day"] is False
    assert slot["notes"] == "am only"

def test_create_all_day_drops_times(client):
    login_as(client, "i2@pmi.edu")  # volunteers post availability too
    r = client.post(URL, json={"date": "2025-09-02", "start_time": "09:00", "end_time": "10:00", "is_all_day": True})
    assert r.status_code == 201
    slot = r.get_json()["slot"]
    assert slot["is_all_day"] is True
    assert slot["start_time"] is None and slot["end_time"] is None

@pytest.mark.parametrize("payload,message", [
    ({"date": "2025-09-01", "start_time": "12:00", "end_time": "09:00"}, "end_time must be after start_time"),
    ({"date": "2025-09-01", "start_time": "09:00", "end_time": "09:00"}, "end_time must be after start_time"),
    ({"date": "2025-09-01", "start_time": "09:00"}, "start_time and end_time are required unless is_all_day is set"),
    ({"start_time": "09:00", "end_time": "10:00"}, "date is required"),
])
def test_create_validation(client, payload, message):
    login_as(client, "i1@pmi.edu")
    r = client.post(URL, json=payload)
    assert r.status_code == 400
    assert r.get_json() == {"success": False, "error": message}

def test_duplicates_conflict(client):
    login_as(client, "i1@pmi.edu")
    assert client.post(URL, json={"date": "2025-09-01", "start_time": "09:00", "end_time": "10:00"}).status_code == 201
    r = client.post(URL, json={"date": "2025-09-01", "start_time": "09:00", "end_time": "11:00"})
    assert r.status_code == 409
    assert client.post(URL, json={"date": "2025-09-03", "is_all_day": True}).status_code == 201
    assert client.post(URL, json={"date": "2025-09-03", "is_all_day": True}).status_code == 409

def test_list_own_with_range(client):
    login_as(client, "i1@pmi.edu")
    for d, s, e in (("2025-09-03", "13:00", "14:00"), ("2025-09-01", "09:00", "10:00"),
                    ("2025-09-03", "08:00", "09:00"), ("2025-09-10", "08:00", "09:00")):
        client.post(URL, json={"date": d, "start_time": s, "end_time": e})
    # someone else's row must not show up
    db.session.add(InstructorAvailability(instructor_id=_uid("i2@pmi.edu"), date=date(2025, 9, 2), is_all_day=True))
    db.session.commit()

    r = client.get(f"{URL}?start_date=2025-09-01&end_date=2025-09-07")
    assert r.status_code == 200
    slots = r.get_json()["slots"]
    assert [(s["date"], s["start_time"]) for s in slots] == [
        ("2025-09-01", "09:00"), ("2025-09-03", "08:00"), ("2025-09-03", "13:00"),
    ]
    assert len(client.get(URL).get_json()["slots"]) == 4
    assert client.get(f"{URL}?start_date=not-a-date").status_code == 400

def test_update_and_delete_own_slot(client):
    login_as(client, "i1@pmi.edu")
    sid = client.post(URL, json={"date": "2025-09-01", "start_time": "09:00", "end_time": "10:00"}).get_json()["slot"]["id"]

    r = client.put(f"{URL}/{sid}", json={"date": "2025-09-01", "start_time": "09:00", "end_time": "11:00"})
    assert r.status_code == 200
    assert r.get_json()["slot"]["end_time"] == "11:00"

    r = client.put(f"{URL}/{sid}", json={"date": "2025-09-01", "is_all_day": True})
    assert r.get_json()["slot"]["is_all_day"] is True

    assert client.delete(f"{URL}/{sid}").status_code == 200
    assert client.get(URL).get_json()["slots"] == []
    assert client.delete(f"{URL}/{sid}").status_code == 404

def test_cannot_touch_other_instructors_slot(client):
    row = InstructorAvailability(instructor_id=_uid("i2@pmi.edu"), date=date(2025, 9, 1),
                                 start_time=time(9), end_time=time(10))
    db.session.add(row)
    db.session.commit()

    login_as(client, "i1@pmi.edu")
    r = client.put(f"{URL}/{row.id}", json={"date": "2025-09-01", "is_all_day": True})
    assert r.status_code == 404
    assert client.delete(f"{URL}/{row.id}").status_code == 404
    assert db.session.get(InstructorAvailability, row.id) is not None

# ---------- submission status ----------
def test_status_requires_lead(client):
    login_as(client, "i1@pmi.edu")
    assert client.get("/api/v1/scheduling/availability-status?week=2025-09-01").status_code == 403

def test_status_week_summary(client):
    db.session.add_all([
        InstructorAvailability(instructor_id=_uid("i1@pmi.edu"), date=date(2025, 9, 4), is_all_day=True),
        InstructorAvailability(instructor_id=_uid("lead@pmi.edu"), date=date(2025, 9, 12), is_all_day=True),
        InstructorAvailability(instructor_id=_uid("gone@pmi.edu"), date=date(2025, 9, 2), is_all_day=True),
    ])
    db.session.commit()

    login_as(client, "lead@pmi.edu")
    assert client.get("/api/v1/scheduling/availability-status").status_code == 400
    assert client.get("/api/v1/scheduling/availability-status?week=09/01/2025").status_code == 400

    r = client.get("/api/v1/scheduling/availability-status?week=2025-09-03")  # a Wednesday
    assert r.status_code == 200
    js = r.get_json()
    assert js["week"] == "2025-09-01"
    assert js["week_end"] == "2025-09-07"
    # inactive and guest users are not listed; ordered by name
    assert [i["email"] for i in js["instructors"]] == ["i1@pmi.edu", "i2@pmi.edu", "lead@pmi.edu"]
    status = {i["email"]: i for i in js["instructors"]}
    assert status["i1@pmi.edu"]["has_submitted"] is True
    assert status["i1@pmi.edu"]["last_submitted"] is not None
    assert status["lead@pmi.edu"]["has_submitted"] is False
    assert status["lead@pmi.edu"]["last_submitted"] is None
    assert js["summary"] == {"total": 3, "submitted": 1, "not_submitted": 2, "percent_submitted": 33}

def test_oversized_slot_id_is_not_found(client):
    login_as(client, "i1@pmi.edu")
    huge = "9" * 30
    assert client.delete(f"{URL}/{huge}").status_code == 404
    r = client.put(f"{URL}/{huge}", json={"date": "2025-09-01", "is_all_day": True})
    assert r.status_code == 404
