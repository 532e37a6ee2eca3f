from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import current_caller, json_body
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        session["user_type"] = s_user.user_type.value

        return jsonify(
            {
                "user_id": s_user.user_id,
                "name": s_user.name,
                "email": s_user.email,
                "role": s_user.role.value,
                "user_type": s_user.user_type.value,
                "user_verified": s_user.user_verified,
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        caller = current_caller()
        if caller is None:
            raise AuthenticationError("Unauthorized: Not authenticated")
        return jsonify(
            {
                "user_id": caller.user_id,
                "name": session.get("name"),
                "role": caller.role.value,
                "user_type": session.get("user_type"),
            }
        )
