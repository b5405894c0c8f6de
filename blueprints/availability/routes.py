# blueprints/availability/routes.py
from __future__ import annotations
import logging
from datetime import date

from flask import Blueprint, request
from flask_login import current_user
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from extensions import db
from blueprints.auth.routes import instructor_required, lead_instructor_required
from blueprints.core.responses import ok, error, first_validation_message
from .schemas import AvailabilityIn
from . import services as svc

api_bp = Blueprint("availability_api", __name__)
log = logging.getLogger(__name__)


def _opt_date(name: str) -> date | None:
    raw = (request.args.get(name) or "").strip()
    return date.fromisoformat(raw) if raw else None


def _parse_body() -> AvailabilityIn:
    return AvailabilityIn.model_validate(request.get_json(silent=True) or {})


@api_bp.get("/scheduling/availability")
@instructor_required
def list_availability():
    try:
        start, end = _opt_date("start_date"), _opt_date("end_date")
    except ValueError:
        return error("Invalid date, use YYYY-MM-DD", 400)
    return ok(slots=svc.list_for_instructor(current_user.id, start, end))


@api_bp.post("/scheduling/availability")
@instructor_required
def create_availability():
    try:
        data = _parse_body()
    except ValidationError as ve:
        return error(first_validation_message(ve), 400)
    try:
        slot = svc.create_slot(current_user.id, data)
    except ValueError:
        return error("Availability already exists for this date and start time", 409)
    except IntegrityError:
        db.session.rollback()
        return error("Availability already exists for this date and start time", 409)
    return ok(201, slot=slot)


@api_bp.put("/scheduling/availability/<int:slot_id>")
@instructor_required
def update_availability(slot_id: int):
    try:
        data = _parse_body()
    except ValidationError as ve:
        return error(first_validation_message(ve), 400)
    try:
        slot = svc.update_slot(current_user.id, slot_id, data)
    except LookupError:
        return error("Availability not found", 404)
    except ValueError:
        return error("Availability already exists for this date and start time", 409)
    except IntegrityError:
        db.session.rollback()
        return error("Availability already exists for this date and start time", 409)
    return ok(slot=slot)


@api_bp.delete("/scheduling/availability/<int:slot_id>")
@instructor_required
def delete_availability(slot_id: int):
    try:
        svc.delete_slot(current_user.id, slot_id)
    except LookupError:
        return error("Availability not found", 404)
    return ok()


@api_bp.get("/scheduling/availability-status")
@lead_instructor_required
def availability_status():
    raw = (request.args.get("week") or "").strip()
    if not raw:
        return error("week query parameter is required (YYYY-MM-DD)", 400)
    try:
        at = date.fromisoformat(raw)
    except ValueError:
        return error("Invalid week parameter. Use YYYY-MM-DD format.", 400)
    return ok(**svc.submission_status(at))
