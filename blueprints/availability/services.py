# blueprints/availability/services.py
from __future__ import annotations
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from extensions import db
from models import User, InstructorAvailability, INSTRUCTOR_ROLES, MAX_ID
from blueprints.team_availability.timeutils import format_time
from .schemas import AvailabilityIn, AvailabilityOut

log = logging.getLogger(__name__)


def to_out(row: InstructorAvailability) -> dict:
    return AvailabilityOut(
        id=row.id,
        date=row.date,
        start_time=format_time(row.start_time),
        end_time=format_time(row.end_time),
        is_all_day=bool(row.is_all_day),
        notes=row.notes,
    ).model_dump(mode="json")


def _week_bounds(d: date) -> Tuple[date, date]:
    start = d - timedelta(days=d.weekday())  # Mon
    return start, start + timedelta(days=6)  # Sun


def _own_slot(instructor_id: int, slot_id: int) -> InstructorAvailability:
    if not 1 <= slot_id <= MAX_ID:
        raise LookupError("SLOT_NOT_FOUND")
    row: Optional[InstructorAvailability] = db.session.get(InstructorAvailability, slot_id)
    if not row or row.instructor_id != instructor_id:
        raise LookupError("SLOT_NOT_FOUND")
    return row


def _ensure_no_duplicate(instructor_id: int, data: AvailabilityIn, exclude_id: int | None = None) -> None:
    # the unique index treats NULL start_time as distinct, so all-day rows need a manual check
    q = InstructorAvailability.query.filter(
        InstructorAvailability.instructor_id == instructor_id,
        InstructorAvailability.date == data.date,
    )
    if data.is_all_day:
        q = q.filter(InstructorAvailability.is_all_day.is_(True))
    else:
        q = q.filter(InstructorAvailability.start_time == data.start_time)
    if exclude_id is not None:
        q = q.filter(InstructorAvailability.id != exclude_id)
    if q.first() is not None:
        raise ValueError("DUPLICATE_SLOT")


def list_for_instructor(instructor_id: int, start: date | None = None, end: date | None = None) -> List[dict]:
    q = InstructorAvailability.query.filter(InstructorAvailability.instructor_id == instructor_id)
    if start:
        q = q.filter(InstructorAvailability.date >= start)
    if end:
        q = q.filter(InstructorAvailability.date <= end)
    q = q.order_by(InstructorAvailability.date.asc(),
                   InstructorAvailability.start_time.asc(),
                   InstructorAvailability.id.asc())
    return [to_out(r) for r in q.all()]


def create_slot(instructor_id: int, data: AvailabilityIn) -> dict:
    _ensure_no_duplicate(instructor_id, data)
    row = InstructorAvailability(
        instructor_id=instructor_id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        is_all_day=data.is_all_day,
        notes=data.notes,
    )
    db.session.add(row)
    db.session.commit()
    log.info("availability %s created for instructor %s on %s", row.id, instructor_id, row.date)
    return to_out(row)


def update_slot(instructor_id: int, slot_id: int, data: AvailabilityIn) -> dict:
    row = _own_slot(instructor_id, slot_id)
    _ensure_no_duplicate(instructor_id, data, exclude_id=row.id)
    row.date = data.date
    row.start_time = data.start_time
    row.end_time = data.end_time
    row.is_all_day = data.is_all_day
    row.notes = data.notes
    db.session.commit()
    return to_out(row)


def delete_slot(instructor_id: int, slot_id: int) -> None:
    row = _own_slot(instructor_id, slot_id)
    db.session.delete(row)
    db.session.commit()
    log.info("availability %s deleted by instructor %s", slot_id, instructor_id)


def submission_status(at: date) -> Dict:
    """Which active instructors have posted availability for the week containing ``at``."""
    week_start, week_end = _week_bounds(at)

    instructors: List[User] = (
        User.query
        .filter(User.role.in_(INSTRUCTOR_ROLES), User.is_active_flag.is_(True))
        .order_by(func.coalesce(User.name, User.email).asc())
        .all()
    )

    latest = dict(
        db.session.query(InstructorAvailability.instructor_id, func.max(InstructorAvailability.created_at))
        .filter(InstructorAvailability.date >= week_start, InstructorAvailability.date <= week_end)
        .group_by(InstructorAvailability.instructor_id)
        .all()
    )

    rows = []
    for u in instructors:
        submitted_at: datetime | None = latest.get(u.id)
        rows.append({
            "id": u.id,
            "email": u.email,
            "name": u.display_name,
            "role": u.role,
            "has_submitted": submitted_at is not None,
            "last_submitted": submitted_at.isoformat(timespec="seconds") if submitted_at else None,
        })

    total = len(rows)
    submitted = sum(1 for r in rows if r["has_submitted"])
    return {
        "week": week_start.isoformat(),
        "week_end": week_end.isoformat(),
        "instructors": rows,
        "summary": {
            "total": total,
            "submitted": submitted,
            "not_submitted": total - submitted,
            "percent_submitted": round(submitted / total * 100) if total else 0,
        },
    }
