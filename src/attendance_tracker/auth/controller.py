from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.http import client_signed_in, error_response, json_body
from ..common.validators import require_min_length, require_non_empty
from ..container import Container
from ..core.exceptions import GatewayError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    store = container.session_store

    def _session_payload():
        user = store.user if client_signed_in(store) else None
        return {
            "ready": store.ready,
            "authenticated": user is not None,
            "user": {"id": user.id, "email": user.email} if user else None,
        }

    @app.route("/api/auth/session", methods=["GET"], endpoint="auth_session")
    def auth_session():
        return jsonify(_session_payload())

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        try:
            email = require_non_empty(data.get("email"), "Email")
            password = require_non_empty(data.get("password"), "Password")
            container.runner.run(store.sign_in(email, password))
        except ValidationError as e:
            return error_response(str(e), 400)
        except GatewayError as e:
            return error_response(str(e), 401)

        if store.user_id is None:
            return error_response("Sign in did not start a session", 401)
        session["user_id"] = store.user_id

        return jsonify({"success": True, **_session_payload()})

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        try:
            email = require_non_empty(data.get("email"), "Email")
            password = require_min_length(data.get("password"), "Password", 6)
            roll_number = require_non_empty(data.get("roll_number"), "Roll number")
            container.runner.run(store.sign_up(email, password, roll_number))
        except (ValidationError, GatewayError) as e:
            return error_response(str(e), 400)

        return jsonify({"success": True, "message": "Account created"}), 201

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        if not client_signed_in(store):
            # Another client's session is not this client's to end.
            session.pop("user_id", None)
            return jsonify({"success": True})

        try:
            container.runner.run(store.sign_out())
        except GatewayError as e:
            logger.warning("Sign out failed: %s", e)
            return error_response(str(e), 502)

        session.pop("user_id", None)
        return jsonify({"success": True})
