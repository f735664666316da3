from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..common.http import domain_error_response, error_response, json_body
from ..common.pagination import PageRequest
from ..container import Container
from ..core.exceptions import DomainError
from .presenters import user_json
from .service import parse_approval_filter

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    user_service = container.user_service

    @app.route("/users", methods=["GET"], endpoint="users_list")
    @guards.admin_required
    def users_list():
        try:
            page = PageRequest.from_args(request.args.get("page"), request.args.get("limit"))
            found = user_service.list_users(
                search=request.args.get("search", ""),
                approval=parse_approval_filter(request.args.get("status")),
                page=page,
            )
            approvers = user_service.approvers_for(found.items)
            return jsonify({
                "users": [user_json(u, approver=approvers.get(u.approved_by)) for u in found.items],
                "totalPages": found.total_pages,
                "currentPage": page.page,
                "total": found.total,
            })
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get users error")
            return error_response("Failed to fetch users", 500)

    @app.route("/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @guards.auth_required
    def users_get(user_id: int):
        try:
            user = user_service.get_user(current=g.current_user, user_id=user_id)
            approvers = user_service.approvers_for([user])
            return jsonify({"user": user_json(user, approver=approvers.get(user.approved_by))})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get user error")
            return error_response("Failed to fetch user", 500)

    @app.route("/users/<int:user_id>", methods=["PUT"], endpoint="users_update")
    @guards.auth_required
    def users_update(user_id: int):
        try:
            data = json_body()
            user = user_service.update_profile(
                current=g.current_user,
                user_id=user_id,
                name=data.get("name"),
                phone=data.get("phone"),
            )
            return jsonify({"message": "Profile updated successfully", "user": user_json(user)})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Update user error")
            return error_response("Failed to update profile", 500)

    @app.route("/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @guards.admin_required
    def users_delete(user_id: int):
        try:
            user_service.delete_user(current=g.current_user, user_id=user_id)
            return jsonify({"message": "User deleted successfully"})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Delete user error")
            return error_response("Failed to delete user", 500)

    @app.route("/users/stats/overview", methods=["GET"], endpoint="users_overview")
    @guards.admin_required
    def users_overview():
        try:
            o = user_service.overview()
            return jsonify({
                "totalUsers": o.total_users,
                "approvedUsers": o.approved_users,
                "pendingUsers": o.pending_users,
                "totalScans": o.total_scans,
                "recentRegistrations": o.recent_registrations,
                "approvalRate": o.approval_rate,
            })
        except Exception:
            logger.exception("Get stats error")
            return error_response("Failed to fetch statistics", 500)
