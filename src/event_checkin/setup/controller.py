from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.datetime_utils import isoformat
from ..common.http import domain_error_response, error_response
from ..container import Container
from ..core.enums import SetupOutcome
from ..core.exceptions import DomainError
from ..users.model import User

logger = logging.getLogger(__name__)

_MESSAGES = {
    SetupOutcome.CREATED: "Admin user created successfully",
    SetupOutcome.PROMOTED: "Existing user updated to admin",
    SetupOutcome.EXISTS: "Admin already exists",
}


def _admin_json(user: User) -> dict:
    return {"id": user.user_id, "name": user.name, "email": user.email, "role": user.role.value}


def register(app: Flask, container: Container) -> None:
    setup_service = container.setup_service

    @app.route("/setup/create-admin", methods=["POST"], endpoint="setup_create_admin")
    def setup_create_admin():
        try:
            outcome, admin = setup_service.create_admin()
            status = 201 if outcome == SetupOutcome.CREATED else 200
            return jsonify({"message": _MESSAGES[outcome], "success": True, "admin": _admin_json(admin)}), status
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Admin creation error")
            return jsonify({"error": "Failed to create admin user", "success": False}), 500

    @app.route("/setup/check-admin", methods=["GET"], endpoint="setup_check_admin")
    def setup_check_admin():
        try:
            status = setup_service.status()
            return jsonify({
                "hasAdmin": status.has_admin,
                "adminCount": status.admin_count,
                "totalUsers": status.total_users,
                "adminUser": _admin_json(status.admin_user) if status.admin_user else None,
                "needsSetup": status.needs_setup,
            })
        except Exception:
            logger.exception("Admin check error")
            return jsonify({
                "success": False,
                "error": "Failed to check admin status",
                "hasAdmin": False,
                "needsSetup": True,
            }), 500

    @app.route("/setup/users", methods=["GET"], endpoint="setup_users")
    def setup_users():
        try:
            users = setup_service.list_users()
            return jsonify({
                "users": [
                    {
                        "id": u.user_id,
                        "name": u.name,
                        "email": u.email,
                        "role": u.role.value,
                        "isApproved": u.is_approved,
                        "createdAt": isoformat(u.created_at),
                    }
                    for u in users
                ],
                "count": len(users),
            })
        except Exception:
            logger.exception("Users fetch error")
            return error_response("Failed to fetch users", 500)
