from __future__ import annotations

from typing import Any, Optional

from flask import request, session

from ..core.caller import Caller
from ..core.enums import Role
from ..core.exceptions import ValidationError


def current_caller() -> Optional[Caller]:
    """Build the caller from the Flask session; None when logged out."""
    if "user_id" not in session:
        return None
    return Caller(user_id=int(session["user_id"]), role=Role(session.get("role", Role.USER.value)))


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_int(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
