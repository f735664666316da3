from __future__ import annotations

import logging

from flask import Flask, g, jsonify, request

from ..common.http import domain_error_response, error_response, json_body
from ..common.pagination import PageRequest
from ..common.validators import optional_text, parse_positive_int
from ..container import Container
from ..core.exceptions import DomainError
from ..users.presenters import user_json
from .decoder import decode_qr_image
from .presenters import scan_json, stats_json
from .service import parse_scan_type

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = container.guards
    qr_service = container.qr_service

    def _issue_response(issue):
        user = issue.user
        return jsonify({
            "message": "QR code generated successfully",
            "qrCode": issue.qr_code,
            "qrData": issue.qr_data,
            "user": {
                "id": user.user_id,
                "name": user.name,
                "email": user.email,
                "isApproved": user.is_approved,
            },
        })

    @app.route("/qr/generate/<int:user_id>", methods=["POST"], endpoint="qr_generate")
    @guards.admin_required
    def qr_generate(user_id: int):
        try:
            issue = qr_service.generate_for_user(
                admin=g.current_user,
                user_id=user_id,
                event_id=json_body().get("eventId"),
            )
            return _issue_response(issue)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("QR generation error")
            return error_response("Failed to generate QR code", 500)

    @app.route("/qr/generate-my-qr", methods=["POST"], endpoint="qr_generate_mine")
    @guards.auth_required
    def qr_generate_mine():
        try:
            issue = qr_service.generate_own(current_user=g.current_user, event_id=json_body().get("eventId"))
            return _issue_response(issue)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("QR generation error")
            return error_response("Failed to generate QR code", 500)

    @app.route("/qr/my-qr", methods=["GET"], endpoint="qr_mine")
    @guards.auth_required
    def qr_mine():
        try:
            user = qr_service.get_my_qr(current_user=g.current_user)
            return jsonify({"qrCode": user.qr_code, "qrData": user.qr_code_data, "isApproved": user.is_approved})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get QR error")
            return error_response("Failed to fetch QR code", 500)

    def _scan_response(outcome):
        user = user_json(outcome.user)
        return jsonify({
            "message": outcome.message,
            "scanResult": outcome.result.value,
            "user": {k: user[k] for k in ("id", "name", "email", "phone", "isApproved", "approvedDate")},
            "scan": scan_json(outcome.scan),
        })

    @app.route("/qr/scan", methods=["POST"], endpoint="qr_scan")
    @guards.admin_required
    def qr_scan():
        try:
            data = json_body()
            qr_data = data.get("qrData")
            if not isinstance(qr_data, str) or not qr_data.strip():
                return error_response("QR data is required", 400)

            outcome = qr_service.scan(
                admin=g.current_user,
                qr_data=qr_data,
                scan_type=parse_scan_type(data.get("scanType")),
                notes=str(data.get("notes") or ""),
                scan_location=optional_text(data.get("scanLocation"), "scanLocation"),
            )
            return _scan_response(outcome)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("QR scan error")
            return error_response("Failed to process QR scan", 500)

    @app.route("/qr/scan/image", methods=["POST"], endpoint="qr_scan_image")
    @guards.admin_required
    def qr_scan_image():
        """Decode an uploaded photo of a QR code, then verify it like /qr/scan."""
        try:
            if "image" not in request.files:
                return error_response("Missing image file", 400)

            qr_data = decode_qr_image(request.files["image"].stream)
            outcome = qr_service.scan(
                admin=g.current_user,
                qr_data=qr_data,
                scan_type=parse_scan_type(request.form.get("scanType")),
                notes=request.form.get("notes", ""),
                scan_location=request.form.get("scanLocation") or None,
            )
            return _scan_response(outcome)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("QR image scan error")
            return error_response("Failed to process QR scan", 500)

    @app.route("/qr/scans", methods=["GET"], endpoint="qr_scans")
    @guards.admin_required
    def qr_scans():
        try:
            page = PageRequest.from_args(request.args.get("page"), request.args.get("limit"))
            user_id = request.args.get("userId")
            scan_type = request.args.get("scanType")

            found = qr_service.list_scans(
                page=page,
                user_id=parse_positive_int(user_id, "userId", default=0) or None,
                scan_type=parse_scan_type(scan_type) if scan_type else None,
            )
            return jsonify({
                "scans": [scan_json(v) for v in found.items],
                "totalPages": found.total_pages,
                "currentPage": page.page,
                "total": found.total,
            })
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get scans error")
            return error_response("Failed to fetch scan history", 500)

    @app.route("/qr/scans/stats", methods=["GET"], endpoint="qr_scan_stats")
    @guards.admin_required
    def qr_scan_stats():
        try:
            return jsonify(stats_json(qr_service.stats()))
        except Exception:
            logger.exception("Get scan stats error")
            return error_response("Failed to fetch scan statistics", 500)
