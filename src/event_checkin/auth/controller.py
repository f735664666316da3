from __future__ import annotations

import logging

from flask import Flask, g, jsonify

from ..common.http import domain_error_response, error_response, json_body
from ..container import Container
from ..core.exceptions import DomainError
from ..users.presenters import user_json

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth_service = container.auth_service

    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        try:
            data = json_body()
            token, user = auth_service.register(
                name=data.get("name", ""),
                email=data.get("email", ""),
                phone=data.get("phone", ""),
                password=data.get("password", ""),
            )
            return jsonify({"message": "Registration successful", "token": token, "user": user_json(user)}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Registration error")
            return error_response("Registration failed", 500)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        try:
            data = json_body()
            token, user = auth_service.login(email=data.get("email", ""), password=data.get("password", ""))
            return jsonify({"message": "Login successful", "token": token, "user": user_json(user)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Login error")
            return error_response("Login failed", 500)

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @container.guards.auth_required
    def auth_me():
        return jsonify({"user": user_json(g.current_user)})
