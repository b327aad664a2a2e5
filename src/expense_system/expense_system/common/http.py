from __future__ import annotations

from datetime import datetime
from functools import wraps

from flask import jsonify, request, session


def error_response(status: int, error: str, message: str):
    return (
        jsonify(
            {
                "timestamp": datetime.now().isoformat(timespec="seconds"),
                "status": status,
                "error": error,
                "message": message,
                "path": request.path,
            }
        ),
        status,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(401, "Unauthorized", "Please log in to continue")
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
