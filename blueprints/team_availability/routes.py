# blueprints/team_availability/routes.py
from __future__ import annotations
import logging

from flask import Blueprint, Response, current_app, request
from flask_login import login_required
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import MAX_ID
from blueprints.auth.routes import caller_email
from blueprints.core.responses import ok, error, first_validation_message
from .schemas import TeamAvailabilityQuery, TeamViewIn, DEFAULT_MAX_DAYS
from .timeutils import InvalidTimeError
from . import services as svc

api_bp = Blueprint("team_availability_api", __name__)
log = logging.getLogger(__name__)


def _parse_query() -> TeamAvailabilityQuery:
    # blank params count as missing
    args = {k: v for k, v in request.args.items() if v.strip()}
    max_days = current_app.config.get("TEAM_AVAILABILITY_MAX_DAYS", DEFAULT_MAX_DAYS)
    return TeamAvailabilityQuery.model_validate(args, context={"max_days": max_days})


def _compute(q: TeamAvailabilityQuery):
    """Runs the engine; returns (report, None) or (None, error response)."""
    try:
        return svc.compute_team_availability(q.emails, q.start_date, q.end_date), None
    except InvalidTimeError as ex:
        log.warning("bad stored availability time: %s", ex)
        return None, error("Invalid availability time", 400)
    except SQLAlchemyError:
        db.session.rollback()
        log.exception("Error computing team availability")
        return None, error("Failed to compute team availability", 500)


@api_bp.get("/scheduling/team-availability")
@login_required
def team_availability():
    try:
        q = _parse_query()
    except ValidationError as ve:
        return error(first_validation_message(ve), 400)

    report, err = _compute(q)
    if err:
        return err
    return ok(**report.to_dict())


@api_bp.get("/scheduling/team-availability/export.csv")
@login_required
def team_availability_csv():
    try:
        q = _parse_query()
    except ValidationError as ve:
        return error(first_validation_message(ve), 400)

    report, err = _compute(q)
    if err:
        return err
    filename = f"team-availability-{q.start_date.isoformat()}-to-{q.end_date.isoformat()}.csv"
    return Response(
        svc.overlaps_csv(report),
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@api_bp.post("/scheduling/team-availability")
@login_required
def save_team_view():
    payload = request.get_json(silent=True) or {}
    try:
        data = TeamViewIn.model_validate(payload)
    except ValidationError as ve:
        return error(first_validation_message(ve), 400)

    try:
        view = svc.save_view(data.name, data.instructor_emails, caller_email())
    except SQLAlchemyError:
        db.session.rollback()
        log.exception("Error saving team view")
        return error("Failed to save team view", 500)
    return ok(view=view.to_dict())


@api_bp.get("/scheduling/team-availability/saved")
@login_required
def saved_team_views():
    views = svc.list_views(caller_email())
    return ok(views=[v.to_dict() for v in views])


@api_bp.delete("/scheduling/team-availability/saved")
@login_required
def delete_team_view():
    raw = (request.args.get("id") or "").strip()
    if not raw:
        return error("id parameter is required", 400)
    try:
        view_id = int(raw)
    except ValueError:
        return error("id must be an integer", 400)
    if not 1 <= view_id <= MAX_ID:
        return error("id must be an integer", 400)
    if not svc.delete_view(view_id, caller_email()):
        return error("View not found", 404)
    return ok()
