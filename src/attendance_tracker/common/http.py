"""Helpers shared by the Flask controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Iterable

from flask import jsonify, request, session

from .store import Store


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def store_response(store: Store, items: Iterable[Any], *, success_status: int = 200):
    """Render `{items, loading, error}`; 502 when the store recorded a gateway failure."""
    payload = {
        "items": [item.to_dict() for item in items],
        "loading": store.loading,
        "error": store.error,
        "status": store.status.value,
    }
    return jsonify(payload), (502 if store.error else success_status)


def client_signed_in(session_store) -> bool:
    """True when this HTTP client is the one that signed the current session in.

    The session store is process-wide; the Flask cookie ties it to a client.
    """
    user_id = session_store.user_id
    return user_id is not None and session.get("user_id") == user_id


def login_required(session_store):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not client_signed_in(session_store):
                return error_response("Please sign in to continue", 401)
            return view(*args, **kwargs)

        return wrapper

    return decorator
