# scripts/dev_db_init.py
from datetime import date, time, timedelta

from app import create_app
from extensions import db
from models import User, InstructorAvailability

DEMO_INSTRUCTORS = [
    # email, name, role
    ("lead@example.com", "Lead Instructor", "lead_instructor"),
    ("i1@example.com", "Instructor One", "instructor"),
    ("i2@example.com", "Instructor Two", "instructor"),
    ("v1@example.com", "Volunteer One", "volunteer_instructor"),
]

def _get_or_create_user(email: str, name: str, role: str) -> User:
    u = User.query.filter_by(email=email).first()
    if not u:
        u = User(email=email, name=name, role=role, is_active_flag=True)
        u.set_password("pass")
        db.session.add(u)
        db.session.flush()
    return u

def seed_minimal():
    if not User.query.filter_by(email="admin@example.com").first():
        admin = User(email="admin@example.com", name="Program Admin", role="admin")
        admin.set_password("pass")
        db.session.add(admin)

    users = [_get_or_create_user(*row) for row in DEMO_INSTRUCTORS]

    # two weeks of staggered availability starting next Monday
    today = date.today()
    monday = today + timedelta(days=(7 - today.weekday()))
    for offset in range(14):
        d = monday + timedelta(days=offset)
        if d.weekday() >= 5:
            continue
        for i, u in enumerate(users):
            exists = InstructorAvailability.query.filter_by(instructor_id=u.id, date=d).first()
            if exists:
                continue
            if i == 0 and d.weekday() == 2:
                db.session.add(InstructorAvailability(instructor_id=u.id, date=d, is_all_day=True))
                continue
            db.session.add(InstructorAvailability(
                instructor_id=u.id, date=d,
                start_time=time(8 + i, 0), end_time=time(14 + i, 0),
            ))

    db.session.commit()

if __name__ == "__main__":
    app = create_app("dev")
    with app.app_context():
        db.create_all()
        seed_minimal()
        print("DB initialized and seeded")
