from __future__ import annotations
from typing import Any

from flask import jsonify
from pydantic import ValidationError

def ok(status: int = 200, **data: Any):
    return jsonify({"success": True, **data}), status

def error(msg: str, status: int = 400):
    return jsonify({"success": False, "error": msg}), status

def first_validation_message(ve: ValidationError) -> str:
    """Readable message for the first pydantic error, for the `error` field."""
    errs = ve.errors()
    if not errs:
        return "Invalid request"
    e = errs[0]
    loc = ".".join(str(p) for p in e.get("loc", ()))
    if e.get("type") == "missing":
        return f"{loc} is required"
    msg = str(e.get("msg", "Invalid value"))
    # custom ValueError messages come prefixed
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    return f"{loc}: {msg}" if loc else msg
