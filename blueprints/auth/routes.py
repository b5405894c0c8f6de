# blueprints/auth/routes.py
from __future__ import annotations
import logging
import time
from functools import wraps
from typing import Callable, Optional

from flask import Blueprint, request, current_app, abort
from flask_login import login_user, logout_user, login_required, current_user

from extensions import login_manager
from models import User, Role, has_min_role
from blueprints.core.responses import ok, error

api_bp = Blueprint("auth_api", __name__)
log = logging.getLogger(__name__)

DEFAULT_RL_MAX = 5
DEFAULT_RL_WIN = 300  # 5 minutes
_login_attempts: dict[str, list[float]] = {}  # key: ip|email -> [timestamps]

# ---------- rate limit ----------
def _rl_key(email: str) -> str:
    ip = request.headers.get("X-Forwarded-For", request.remote_addr or "0.0.0.0").split(",")[0].strip()
    return f"{ip}|{(email or '').lower()}"

def _rl_check_and_hit(email: str) -> bool:
    now = time.time()
    win = current_app.config.get("AUTH_RL_WINDOW", DEFAULT_RL_WIN)
    mx = current_app.config.get("AUTH_RL_MAX", DEFAULT_RL_MAX)
    key = _rl_key(email)
    cutoff = now - win
    # drop buckets whose newest hit has expired
    for k in [k for k, b in _login_attempts.items() if not b or b[-1] < cutoff]:
        del _login_attempts[k]
    bucket = _login_attempts.setdefault(key, [])
    while bucket and bucket[0] < cutoff:
        bucket.pop(0)
    if len(bucket) >= mx:
        return False
    bucket.append(now)
    return True

def reset_rate_limits() -> None:
    _login_attempts.clear()

# ---------- role decorators ----------
def min_role_required(required: Role):
    def decorator(fn: Callable):
        @wraps(fn)
        @login_required
        def wrapper(*args, **kwargs):
            if not has_min_role(getattr(current_user, "role", None), required):
                abort(403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator

# volunteer instructors share the instructor level
instructor_required = min_role_required(Role.INSTRUCTOR)
lead_instructor_required = min_role_required(Role.LEAD_INSTRUCTOR)

def caller_email() -> str:
    return (getattr(current_user, "email", "") or "").lower()

# ---------- 401/403 handlers ----------
@login_manager.unauthorized_handler
def _unauth():
    return error("Unauthorized", 401)

@api_bp.app_errorhandler(403)
def _forbidden(e):
    return error("Forbidden", 403)

# ---------- API ----------
@api_bp.post("/auth/login")
def api_login():
    payload = request.get_json(silent=True) or request.form or {}
    if not hasattr(payload, "get"):
        return error("Email and password are required", 400)
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""

    if not email or not password:
        return error("Email and password are required", 400)

    if not _rl_check_and_hit(email):
        log.warning("login rate limit hit for %s", email)
        return error("Too many login attempts", 429)

    user: Optional[User] = User.query.filter_by(email=email).first()
    if not user or not user.password_hash or not user.check_password(password):
        return error("Invalid credentials", 401)

    if not user.is_active:
        return error("Account is inactive", 403)

    login_user(user, remember=True)
    return ok(user={"id": user.id, "email": user.email, "name": user.display_name, "role": user.role})

@api_bp.post("/auth/logout")
@login_required
def api_logout():
    logout_user()
    return ok()

@api_bp.get("/auth/me")
@login_required
def api_me():
    u = current_user
    return ok(user={"id": u.id, "email": u.email, "name": u.display_name, "role": u.role})
