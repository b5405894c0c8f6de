# blueprints/team_availability/services.py
from __future__ import annotations
import csv
import logging
from datetime import date
from io import StringIO
from typing import List, Optional, Sequence

from sqlalchemy import func

from extensions import db
from models import User, InstructorAvailability, TeamAvailabilityView
from .engine import AvailabilitySlot, TeamAvailabilityReport, assemble_report
from .timeutils import format_time

log = logging.getLogger(__name__)


# ---------- fetch adapter ----------
def find_instructors(emails: Sequence[str]) -> List[User]:
    if not emails:
        return []
    return User.query.filter(func.lower(User.email).in_(list(emails))).all()


def fetch_availability(emails: Sequence[str], start: date, end: date) -> List[AvailabilitySlot]:
    """Availability rows of the given instructors in [start, end] as typed records.

    Emails that match no user are dropped here; the engine sees them as
    instructors with no availability.
    """
    users = find_instructors(emails)
    if not users:
        return []
    by_id = {u.id: u for u in users}

    rows: List[InstructorAvailability] = (
        InstructorAvailability.query
        .filter(InstructorAvailability.instructor_id.in_(list(by_id)),
                InstructorAvailability.date >= start,
                InstructorAvailability.date <= end)
        .order_by(InstructorAvailability.date.asc(),
                  InstructorAvailability.start_time.asc(),
                  InstructorAvailability.id.asc())
        .all()
    )

    out: List[AvailabilitySlot] = []
    for r in rows:
        u = by_id[r.instructor_id]
        out.append(AvailabilitySlot(
            instructor_email=u.email.lower(),
            instructor_name=u.name,
            date=r.date,
            start_time=format_time(r.start_time),
            end_time=format_time(r.end_time),
            is_all_day=bool(r.is_all_day),
        ))
    return out


def compute_team_availability(emails: Sequence[str], start: date, end: date) -> TeamAvailabilityReport:
    slots = fetch_availability(emails, start, end)
    report = assemble_report(slots, emails)
    log.info("team availability: %d instructors, %s..%s, %d rows, %d windows",
             len(emails), start.isoformat(), end.isoformat(), len(slots), len(report.overlaps))
    return report


# ---------- CSV ----------
def overlaps_csv(report: TeamAvailabilityReport) -> str:
    """
    CSV: date;day;start_time;end_time;duration_minutes
    """
    buf = StringIO()
    w = csv.writer(buf, delimiter=";")
    w.writerow(["date", "day", "start_time", "end_time", "duration_minutes"])
    for win in report.overlaps:
        d = win.to_dict()
        w.writerow([d["date"], d["day_name"], d["start_time"], d["end_time"], d["duration_minutes"]])
    return buf.getvalue()


# ---------- saved views ----------
def save_view(name: str, emails: Sequence[str], created_by: str) -> TeamAvailabilityView:
    view = TeamAvailabilityView(name=name, instructor_emails=list(emails), created_by=created_by.lower())
    db.session.add(view)
    db.session.commit()
    log.info("saved team view %s (%d instructors) for %s", view.id, len(emails), view.created_by)
    return view


def list_views(owner: str) -> List[TeamAvailabilityView]:
    return (TeamAvailabilityView.query
            .filter_by(created_by=owner.lower())
            .order_by(TeamAvailabilityView.created_at.desc(), TeamAvailabilityView.id.desc())
            .all())


def delete_view(view_id: int, owner: str) -> bool:
    view: Optional[TeamAvailabilityView] = db.session.get(TeamAvailabilityView, view_id)
    if not view or view.created_by != owner.lower():
        return False
    db.session.delete(view)
    db.session.commit()
    return True
